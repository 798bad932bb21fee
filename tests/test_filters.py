"""Tests for filter criteria and action construction."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from gmail_bridge.gmail.filters import (
    build_filter_action,
    build_filter_criteria,
    create_filter,
    delete_filter,
    list_filters,
)
from gmail_bridge.utils.errors import ValidationError


class TestBuildFilterCriteria:
    """Tests for build_filter_criteria."""

    def test_only_non_empty_fields(self) -> None:
        criteria = build_filter_criteria(from_email="boss@example.com", subject="")

        assert criteria == {"from": "boss@example.com"}

    def test_all_fields(self) -> None:
        criteria = build_filter_criteria(
            from_email="a@example.com",
            to="b@example.com",
            subject="Invoice",
            query="has:attachment",
        )

        assert criteria == {
            "from": "a@example.com",
            "to": "b@example.com",
            "subject": "Invoice",
            "query": "has:attachment",
        }

    def test_empty(self) -> None:
        assert build_filter_criteria() == {}


class TestBuildFilterAction:
    """Tests for build_filter_action shorthands."""

    def test_mark_read_and_archive(self) -> None:
        action = build_filter_action(mark_read=True, archive=True)

        assert action == {"removeLabelIds": ["UNREAD", "INBOX"]}

    def test_trash_keeps_explicit_labels(self) -> None:
        action = build_filter_action(add_label_ids=["Label_1"], trash=True)

        assert action["addLabelIds"] == ["Label_1", "TRASH"]

    def test_star_and_important(self) -> None:
        action = build_filter_action(star=True, mark_important=True)

        assert action == {"addLabelIds": ["STARRED", "IMPORTANT"]}

    def test_duplicates_removed(self) -> None:
        action = build_filter_action(
            add_label_ids=["STARRED", "Label_1", "Label_1"],
            remove_label_ids=["UNREAD"],
            star=True,
            mark_read=True,
        )

        assert action["addLabelIds"] == ["STARRED", "Label_1"]
        assert action["removeLabelIds"] == ["UNREAD"]

    def test_forward(self) -> None:
        action = build_filter_action(forward="archive@example.com")

        assert action == {"forward": "archive@example.com"}

    def test_empty(self) -> None:
        assert build_filter_action() == {}

    def test_input_lists_not_mutated(self) -> None:
        add = ["Label_1"]

        build_filter_action(add_label_ids=add, trash=True)

        assert add == ["Label_1"]


class TestFilterOperations:
    """Tests for filter API calls."""

    @pytest.fixture
    def service(self) -> MagicMock:
        return MagicMock()

    def test_create(self, service: MagicMock) -> None:
        filters = service.users().settings().filters()
        filters.create.return_value.execute.return_value = {
            "id": "f1",
            "criteria": {"from": "a@example.com"},
            "action": {"addLabelIds": ["TRASH"]},
        }

        result = create_filter(
            service, {"from": "a@example.com"}, {"addLabelIds": ["TRASH"]}
        )

        filters.create.assert_called_with(
            userId="me",
            body={
                "criteria": {"from": "a@example.com"},
                "action": {"addLabelIds": ["TRASH"]},
            },
        )
        assert result.id == "f1"

    def test_create_without_criteria(self, service: MagicMock) -> None:
        with pytest.raises(ValidationError) as exc_info:
            create_filter(service, {}, {"addLabelIds": ["TRASH"]})

        assert exc_info.value.field == "criteria"
        service.users().settings().filters().create.assert_not_called()

    def test_create_without_action(self, service: MagicMock) -> None:
        with pytest.raises(ValidationError) as exc_info:
            create_filter(service, {"from": "a@example.com"}, {})

        assert exc_info.value.field == "action"

    def test_list_reads_filter_key(self, service: MagicMock) -> None:
        filters = service.users().settings().filters()
        filters.list.return_value.execute.return_value = {
            "filter": [{"id": "f1"}, {"id": "f2"}]
        }

        assert [f.id for f in list_filters(service)] == ["f1", "f2"]

    def test_list_empty(self, service: MagicMock) -> None:
        service.users().settings().filters().list.return_value.execute.return_value = {}

        assert list_filters(service) == []

    def test_delete(self, service: MagicMock) -> None:
        delete_filter(service, "f1")

        service.users().settings().filters().delete.assert_called_with(
            userId="me", id="f1"
        )
