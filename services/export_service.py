"""
Export service — Flat forecast projection and Excel report.

Builds the tabular ForecastExport carried on every VesselForecastResult
and renders a finished result to an .xlsx workbook for planners. The
forecasting engine itself never writes files; callers decide where the
returned bytes go.
"""

from io import BytesIO
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
import structlog

from config import settings
from models.fleet import CoreFleetBaseline, FleetGapAnalysis
from models.recommendation import ManagementRecommendation
from models.result import (
    ForecastExport,
    MonthlyBreakdownRow,
    RecommendationRow,
    ScenarioSummaryRow,
    VesselForecastResult,
)
from models.scenario import ScenarioResult

logger = structlog.get_logger(__name__)


def month_confidence(result: ScenarioResult, month_key: str) -> float:
    """Mean location confidence for one month; 0 with no locations."""
    values = [f.confidence[month_key] for f in result.location_forecasts if month_key in f.confidence]
    if not values:
        return 0.0
    return round(sum(values) / len(values), 4)


def month_action(gap: int) -> str:
    """Short planner-facing action for a baseline gap."""
    if gap > 0:
        return f"Charter {gap}"
    if gap < settings.release_gap_threshold:
        return f"Consider release of {-gap}"
    return "Maintain core fleet"


class ExportService:
    """Service for forecast export data and Excel reports."""

    def __init__(self, log=None):
        self.logger = log or logger

    def build_export_data(
        self,
        results: list[ScenarioResult],
        gap_analyses: list[FleetGapAnalysis],
        recommendations: list[ManagementRecommendation],
        baseline: CoreFleetBaseline,
        base_scenario_id: str,
    ) -> ForecastExport:
        """
        Flatten a forecast run into summary, monthly and recommendation rows.

        Monthly rows cover the base scenario only.
        """
        gaps_by_id = {g.scenario_id: g for g in gap_analyses}

        forecast_summary = []
        for result in results:
            gap = gaps_by_id[result.scenario.id]
            forecast_summary.append(ScenarioSummaryRow(
                scenario_id=result.scenario.id,
                scenario=result.scenario.name,
                recommended_fleet_size=result.recommended_fleet_size,
                max_gap=gap.max_gap,
                average_utilization=gap.average_utilization,
                core_fleet_baseline=baseline.base_vessel_count,
                plus_up_months=len(gap.plus_up_months),
                shed_opportunities=len(gap.shed_months),
                confidence_score=result.confidence_score,
                estimated_charter_cost=gap.estimated_charter_cost,
            ))

        monthly_breakdown = []
        base = next((r for r in results if r.scenario.id == base_scenario_id), None)
        if base is not None:
            base_gap = gaps_by_id[base.scenario.id]
            for month_key in base.months:
                gap = base_gap.gap_by_month.get(month_key, 0)
                monthly_breakdown.append(MonthlyBreakdownRow(
                    month=month_key,
                    total_demand=base.total_demand_forecast[month_key],
                    total_capability=base.total_capability_forecast.get(month_key, 0.0),
                    required_vessels=base.vessel_requirements_by_month.get(month_key, 0),
                    core_fleet_baseline=baseline.base_vessel_count,
                    gap=gap,
                    utilization_pct=round(base_gap.utilization_by_month.get(month_key, 0.0) * 100, 1),
                    inject_impact=base.inject_impact_by_month.get(month_key, 0.0),
                    confidence=month_confidence(base, month_key),
                    recommendation=month_action(gap),
                ))

        recommendation_rows = [
            RecommendationRow(
                id=r.id,
                type=r.type.value,
                priority=r.priority.value,
                title=r.title,
                target_month=r.target_month or "",
                vessel_impact=r.vessel_impact,
                cost_impact=r.cost_impact,
                confidence=r.confidence,
            )
            for r in recommendations
        ]

        return ForecastExport(
            forecast_summary=forecast_summary,
            monthly_breakdown=monthly_breakdown,
            recommendations=recommendation_rows,
        )

    def generate_forecast_workbook(self, result: VesselForecastResult) -> BytesIO:
        """
        Generate Excel report for a forecast run.

        Creates:
        - Summary sheet with one row per scenario
        - Monthly Breakdown sheet for the base scenario
        - Recommendations sheet

        Args:
            result: Completed VesselForecastResult

        Returns:
            BytesIO containing the Excel file
        """
        export = result.export_data

        self.logger.info(
            "generating_forecast_workbook",
            status=result.status.value,
            scenarios=len(export.forecast_summary),
            months=len(export.monthly_breakdown),
            recommendations=len(export.recommendations),
        )

        wb = Workbook()

        # Styles
        title_font = Font(bold=True, size=14)
        header_font = Font(bold=True, size=11)
        thin_border = Border(
            bottom=Side(style="thin", color="000000")
        )
        header_fill = PatternFill(start_color="E0E8FF", end_color="E0E8FF", fill_type="solid")
        plus_up_fill = PatternFill(start_color="FFE0E0", end_color="FFE0E0", fill_type="solid")
        shed_fill = PatternFill(start_color="E0FFE0", end_color="E0FFE0", fill_type="solid")

        def write_header(ws, row: int, headers: list[str]) -> None:
            for col, header in enumerate(headers, start=1):
                cell = ws.cell(row=row, column=col, value=header)
                cell.font = header_font
                cell.fill = header_fill
                cell.border = thin_border
                cell.alignment = Alignment(horizontal="center", wrap_text=True)

        # ===== SUMMARY SHEET =====
        ws_summary = wb.active
        ws_summary.title = "Summary"
        for col, width in zip("ABCDEFGHIJ", (28, 14, 10, 14, 14, 12, 12, 12, 16, 14)):
            ws_summary.column_dimensions[col].width = width

        ws_summary["A1"] = "VESSEL FLEET FORECAST"
        ws_summary["A1"].font = title_font
        ws_summary["A3"] = "Analysis date:"
        ws_summary["B3"] = result.analysis_date.isoformat()
        ws_summary["A4"] = "Status:"
        ws_summary["B4"] = result.status.value
        ws_summary["A5"] = "Core fleet:"
        ws_summary["B5"] = result.core_fleet_baseline.base_vessel_count

        row = 7
        if result.budget_violations:
            ws_summary[f"A{row}"] = "BUDGET VIOLATIONS"
            ws_summary[f"A{row}"].font = header_font
            row += 1
            for violation in result.budget_violations:
                ws_summary[f"A{row}"] = violation.limit
                ws_summary[f"B{row}"] = violation.requested
                ws_summary[f"C{row}"] = violation.allowed
                row += 1
            row += 1

        write_header(ws_summary, row, [
            "Scenario", "Fleet Size", "Max Gap", "Avg Utilization", "Core Fleet",
            "Plus-Up Months", "Shed Months", "Confidence", "Charter Cost (USD)",
        ])
        row += 1
        for summary in export.forecast_summary:
            ws_summary[f"A{row}"] = summary.scenario
            ws_summary[f"B{row}"] = summary.recommended_fleet_size
            ws_summary[f"C{row}"] = summary.max_gap
            ws_summary[f"D{row}"] = summary.average_utilization
            ws_summary[f"D{row}"].number_format = "0.0%"
            ws_summary[f"E{row}"] = summary.core_fleet_baseline
            ws_summary[f"F{row}"] = summary.plus_up_months
            ws_summary[f"G{row}"] = summary.shed_opportunities
            ws_summary[f"H{row}"] = summary.confidence_score
            ws_summary[f"H{row}"].number_format = "0.00"
            ws_summary[f"I{row}"] = round(float(summary.estimated_charter_cost))
            ws_summary[f"I{row}"].number_format = "#,##0"
            row += 1

        # ===== MONTHLY BREAKDOWN SHEET =====
        ws_monthly = wb.create_sheet("Monthly Breakdown")
        for col, width in zip("ABCDEFGHIJ", (10, 14, 14, 12, 12, 8, 14, 14, 12, 24)):
            ws_monthly.column_dimensions[col].width = width

        write_header(ws_monthly, 1, [
            "Month", "Demand", "Capability", "Required", "Core Fleet",
            "Gap", "Utilization %", "Inject Impact", "Confidence", "Action",
        ])
        row = 2
        for month in export.monthly_breakdown:
            ws_monthly[f"A{row}"] = month.month
            ws_monthly[f"B{row}"] = month.total_demand
            ws_monthly[f"C{row}"] = month.total_capability
            ws_monthly[f"D{row}"] = month.required_vessels
            ws_monthly[f"E{row}"] = month.core_fleet_baseline
            ws_monthly[f"F{row}"] = month.gap
            ws_monthly[f"G{row}"] = month.utilization_pct
            ws_monthly[f"H{row}"] = month.inject_impact
            ws_monthly[f"I{row}"] = month.confidence
            ws_monthly[f"J{row}"] = month.recommendation

            if month.gap > 0:
                ws_monthly[f"F{row}"].fill = plus_up_fill
            elif month.gap < settings.release_gap_threshold:
                ws_monthly[f"F{row}"].fill = shed_fill
            row += 1

        # ===== RECOMMENDATIONS SHEET =====
        ws_recs = wb.create_sheet("Recommendations")
        for col, width in zip("ABCDEFGH", (44, 22, 10, 40, 12, 14, 16, 12)):
            ws_recs.column_dimensions[col].width = width

        write_header(ws_recs, 1, [
            "ID", "Type", "Priority", "Title", "Target Month",
            "Vessel Impact", "Cost Impact (USD)", "Confidence",
        ])
        row = 2
        for rec in export.recommendations:
            ws_recs[f"A{row}"] = rec.id
            ws_recs[f"B{row}"] = rec.type
            ws_recs[f"C{row}"] = rec.priority
            ws_recs[f"D{row}"] = rec.title
            ws_recs[f"E{row}"] = rec.target_month
            ws_recs[f"F{row}"] = rec.vessel_impact
            if rec.cost_impact is not None:
                ws_recs[f"G{row}"] = round(float(rec.cost_impact))
                ws_recs[f"G{row}"].number_format = "#,##0"
            ws_recs[f"H{row}"] = rec.confidence
            if rec.priority in ("critical", "high"):
                ws_recs[f"C{row}"].font = Font(bold=True)
            row += 1

        self.logger.info(
            "forecast_workbook_generated",
            sheets=wb.sheetnames,
        )

        # Save to BytesIO
        output = BytesIO()
        wb.save(output)
        output.seek(0)

        return output


# Singleton instance
_export_service: Optional[ExportService] = None


def get_export_service() -> ExportService:
    """Get or create ExportService instance."""
    global _export_service
    if _export_service is None:
        _export_service = ExportService()
    return _export_service
