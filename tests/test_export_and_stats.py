"""Tests de exportación CSV y estadísticas del dashboard."""

from datetime import date

from thermal_api.export.csv_export import (
    HEADERS,
    as_excel_text,
    export_filename,
    export_records,
    records_to_frame,
)
from thermal_api.stats.dashboard import (
    build_dashboard,
    defect_stats,
    monthly_counts,
    severity_distribution,
)

from conftest import UNIT, make_record


def _decode(data: bytes) -> str:
    assert data[:2] == b"\xff\xfe"
    return data[2:].decode("utf-16-le")


# =============================================================================
# EXPORTACIÓN
# =============================================================================

class TestCsvExport:

    def test_excel_text_wrapping(self):
        assert as_excel_text("12/5") == '="12/5"'
        assert as_excel_text(None) == '=""'
        assert as_excel_text('a"b') == '="a""b"'

    def test_frame_has_fixed_headers(self):
        frame = records_to_frame([make_record()])
        assert list(frame.columns) == HEADERS
        assert frame.iloc[0]["Nhiệt độ đo (°C)"] == "45"
        assert frame.iloc[0]["Ngày đo"] == '="14/3/2026"'

    def test_tab_separated_utf16_with_bom(self):
        text = _decode(export_records([make_record(), make_record(device_location="Cột 9")]))
        lines = text.strip("\n").split("\n")

        assert len(lines) == 3
        assert lines[0].split("\t") == HEADERS
        assert "Cột 12/5" in lines[1]
        assert "Mân Thái" in lines[1]

    def test_empty_export_has_only_headers(self):
        text = _decode(export_records([]))
        assert text.strip("\n").split("\n") == ["\t".join(HEADERS)]

    def test_post_temp_blank_when_missing(self):
        frame = records_to_frame([make_record(post_temp=None), make_record(post_temp=36.5)])
        assert frame.iloc[0]["Nhiệt độ sau xử lý"] == ""
        assert frame.iloc[1]["Nhiệt độ sau xử lý"] == "36.5"

    def test_post_temp_zero_is_written(self):
        frame = records_to_frame([make_record(post_temp=0.0)])
        assert frame.iloc[0]["Nhiệt độ sau xử lý"] == "0"

    def test_filename(self):
        assert export_filename(UNIT, now_ms=1700000000000) == "Ket_qua_nhiet_Điện_lực_Sơn_Trà_1700000000000.csv"


# =============================================================================
# DASHBOARD
# =============================================================================

class TestDashboardStats:

    def test_monthly_counts_current_year_only(self):
        records = [
            make_record(date="2026-01-05"),
            make_record(date="2026-01-20"),
            make_record(date="2026-03-01"),
            make_record(date="2025-01-05"),
            make_record(date="không rõ"),
        ]
        monthly = monthly_counts(records, 2026)

        assert len(monthly) == 12
        assert monthly[0] == {"name": "Th1", "count": 2}
        assert monthly[2]["count"] == 1
        assert sum(m["count"] for m in monthly) == 3

    def test_severity_distribution_skips_empty_levels(self):
        records = [
            make_record(measured_temp=40, reference_temp=38),
            make_record(measured_temp=80, reference_temp=38),
        ]
        dist = severity_distribution(records)
        assert [d["level"] for d in dist] == ["Normal", "Emergency"]
        assert dist[1]["name"] == "Nguy cấp"
        assert dist[1]["color"] == "#ef4444"

    def test_defect_stats(self):
        records = [
            make_record(measured_temp=60, reference_temp=38, action_plan="Thay kẹp", processed_date="2026-03-02"),
            make_record(measured_temp=60, reference_temp=38, action_plan="Siết lại"),
            make_record(measured_temp=60, reference_temp=38, action_plan="   "),
            make_record(measured_temp=40, reference_temp=38, action_plan="Không tính"),
        ]
        stats = {d["key"]: d["value"] for d in defect_stats(records)}
        assert stats == {"defects": 3, "planned": 2, "processed": 1}

    def test_build_dashboard(self):
        stats = build_dashboard([make_record()], scope=UNIT, today=date(2026, 6, 1))
        assert stats["scope"] == UNIT
        assert stats["year"] == 2026
        assert stats["total"] == 1
        assert set(stats) == {"scope", "year", "total", "monthly", "severity", "defects"}
