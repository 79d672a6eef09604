"""
gridreport/report.py

Plain-text (Discord markdown) rendering of a `CombinedReport`.

Pure functions only; nothing here performs I/O.

Layout
------
1. Header.
2. Load/reserve section, only when load data is present:
   current figures, today's forecast, yesterday's figures and, when the
   real-time peak supply is positive, a real-time peak subsection.
3. Generation section: totals, installed capacity, percentage loaded,
   per-type breakdown (descending), top plant/unit, status counts, ratios.
4. Data source line and disclaimer.
"""

from __future__ import annotations

from .models import CombinedReport, LoadSummary, PowerAnalysis

# Reserve-margin indicator letter -> glyph. Unknown letters get UNKNOWN_GLYPH.
RESERVE_GLYPHS = {
    "G": "🟢",
    "Y": "🟡",
    "O": "🟠",
    "R": "🔴",
}
UNKNOWN_GLYPH = "⚪"

SOURCE_LINE = "📊 資料來源: [台電公司開放資料](<https://data.gov.tw/dataset/8931>)"
DISCLAIMER = "⚠️本資料可能會有錯誤或延遲，造成損失與我們無關"


def reserve_indicator_emoji(indicator: str) -> str:
    return RESERVE_GLYPHS.get(indicator, UNKNOWN_GLYPH)


def loaded_percent(analysis: PowerAnalysis) -> float:
    """Generation as a percentage of installed capacity (0.0 if none)."""
    if analysis.total_capacity <= 0.0:
        return 0.0
    return analysis.total_generation / analysis.total_capacity * 100.0


def render_load(load: LoadSummary) -> list[str]:
    lines = [
        "⚡ **電力供需資訊**",
        f"📊 **目前用電量**: {load.current_load:.1f} 萬瓩",
        f"📈 **目前使用率**: {load.current_util_rate:.1f}%",
        f"🔌 **預估今日最大供電能力**: {load.forecast_max_supply_capacity:.1f} 萬瓩",
        f"⬆️ **預估今日最高用電**: {load.forecast_peak_demand_load:.1f} 萬瓩",
        f"🔋 **預估今日尖峰備轉容量**: {load.forecast_peak_reserve_capacity:.1f} 萬瓩",
        f"{reserve_indicator_emoji(load.forecast_peak_reserve_indicator)} "
        f"**預估今日尖峰備轉容量率**: {load.forecast_peak_reserve_rate:.2f}%",
        f"🕐 **預估尖峰用電時段**: {load.forecast_peak_hour_range}",
        f"📅 **資料更新時間**: {load.publish_time}",
        "",
        "📊 **昨日電力資訊**",
        f"🔌 **最大供電能力**: {load.yesterday_max_supply_capacity:.1f} 萬瓩",
        f"⬆️ **尖峰用電量**: {load.yesterday_peak_demand_load:.1f} 萬瓩",
        f"🔋 **尖峰備轉容量**: {load.yesterday_peak_reserve_capacity:.1f} 萬瓩",
        f"{reserve_indicator_emoji(load.yesterday_peak_reserve_indicator)} "
        f"**尖峰備轉容量率**: {load.yesterday_peak_reserve_rate:.2f}%",
        "",
    ]
    if load.real_hour_max_supply_capacity > 0.0:
        lines += [
            "⏰ **即時尖峰資訊**",
            f"🔌 **即時最大供電能力**: {load.real_hour_max_supply_capacity:.1f} 萬瓩",
            f"🕰️ **尖峰時間**: {load.real_hour_peak_time}",
            "",
        ]
    return lines


def render_generation(analysis: PowerAnalysis) -> list[str]:
    lines = [
        "🏭 **發電機組資訊**",
        f"📅 **更新時間**: {analysis.update_time}",
        f"⚡ **總發電量**: {analysis.total_generation:.1f} MW",
        f"🔄 **裝置容量**: {analysis.total_capacity:.1f} MW",
        f"📊 **發電占比**: {loaded_percent(analysis):.1f}%",
        "",
        "🏭 **各能源發電量**:",
    ]
    # sorted() is stable, so equal generation keeps insertion order.
    by_type = sorted(analysis.generation_by_type.items(), key=lambda kv: kv[1], reverse=True)
    lines += [f"   • {energy_type}: {mw:.1f} MW" for energy_type, mw in by_type]

    plant, plant_mw = analysis.top_plant
    unit, unit_mw = analysis.top_unit
    lines += [
        "",
        f"🏆 **發電量最高電廠**: {plant} ({plant_mw:.1f} MW)",
        f"🥇 **發電量最高機組**: {unit} ({unit_mw:.1f} MW)",
        "",
        "📋 **運轉狀態統計**:",
        f"   🌱 環保限制/運轉限制: {analysis.restriction_count} 部",
        f"   🔧 歲修/檢修: {analysis.maintenance_count} 部",
        f"   ⚠️ 故障: {analysis.fault_count} 部",
        "",
        f"🌿 **再生能源占比**: {analysis.renewable_ratio:.1f}%",
        f"🏢 **民營電廠+購電占比**: {analysis.private_ratio:.1f}%",
    ]
    return lines


def render(report: CombinedReport) -> str:
    """Render the full report message."""
    lines = ["🔋 **台電即時電力資訊** 🔋", ""]
    if report.load is not None:
        lines += render_load(report.load)
    lines += render_generation(report.analysis)
    lines += ["", SOURCE_LINE, DISCLAIMER]
    return "\n".join(lines)


def render_error(exc: Exception) -> str:
    """Short notice sent in place of the report when generation data failed."""
    return f"❌ 無法取得台電發電資料: {exc}"
