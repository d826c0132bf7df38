"""Tests for core data models."""
import pytest
from pydantic import ValidationError

from chartdeck.models.chart import CatalogPage, Chart, next_status
from chartdeck.models.submission import ChartFile, ChartPatch, PendingSubmission


class TestChart:
    def test_minimal_chart(self):
        chart = Chart(id="c1")
        assert chart.title == ""
        assert chart.tags == []
        assert chart.cover_url == ""
        assert chart.status == "PRIVATE"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Chart(id="c1", status="DRAFT")

    def test_rating_keeps_int(self):
        assert Chart(id="c1", rating=12).rating == 12
        assert isinstance(Chart(id="c1", rating=12).rating, int)


class TestNextStatus:
    def test_cycle(self):
        assert next_status("PRIVATE") == "PUBLIC"
        assert next_status("PUBLIC") == "UNLISTED"
        assert next_status("UNLISTED") == "PRIVATE"

    def test_unknown_restarts(self):
        assert next_status(None) == "PRIVATE"
        assert next_status("DRAFT") == "PRIVATE"


class TestCatalogPage:
    def test_empty_by_default(self):
        page = CatalogPage()
        assert page.is_empty
        assert page.current_page == 0
        assert page.total_count == 0

    def test_find(self):
        page = CatalogPage(items=[Chart(id="a"), Chart(id="b", title="B")])
        assert page.find("b").title == "B"
        assert page.find("zzz") is None


class TestChartPatch:
    def test_unset_fields_are_omitted(self):
        patch = ChartPatch(description="new words", includes_jacket=False)
        assert patch.to_dict() == {"description": "new words", "includes_jacket": False}

    def test_json_omits_unset(self):
        assert ChartPatch(rating=3).to_json() == '{"rating":3}'

    def test_empty_tag_list_is_kept_when_set(self):
        assert ChartPatch(tags=[]).to_dict() == {"tags": []}


class TestPendingSubmission:
    def test_defaults(self):
        sub = PendingSubmission()
        assert sub.mode == "create"
        assert sub.jacket is None
        assert sub.target is None

    def test_assignment_is_validated(self):
        sub = PendingSubmission()
        with pytest.raises(ValidationError):
            sub.mode = "replace"


class TestChartFile:
    def test_from_path(self, tmp_path):
        path = tmp_path / "cover.png"
        path.write_bytes(b"\x89PNG")
        cf = ChartFile.from_path(path)
        assert cf.filename == "cover.png"
        assert cf.content == b"\x89PNG"
        assert cf.content_type == "image/png"

    def test_httpx_tuple_defaults_content_type(self):
        cf = ChartFile(filename="level", content=b"{}")
        assert cf.as_httpx_file() == ("level", b"{}", "application/octet-stream")
