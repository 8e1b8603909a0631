# court_estimator/quote.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from court_estimator.estimator import CourtEstimate, quote_project_name
from court_estimator.models import CostSection


def _section_lines(section: CostSection) -> List[str]:
    lines = []
    for item in section.visible_lines():
        lines.append(
            f"  {item.description:<38} "
            f"{item.quantity:>9.2f} {item.unit:<6} = {item.subtotal:>10.2f}"
        )
    lines.append(f"  {'Subtotal':<38} {'':>16} = {section.subtotal:>10.2f}")
    return lines


def render_quote(
    estimate: CourtEstimate,
    customer_name: Optional[str] = None,
    project_name: Optional[str] = None,
    output_path: Optional[str] = None,
) -> bytes:
    """
    Plain-text court surfacing quote.

    Lists the base project sections, tax, margin and total, followed by the
    optional equipment packages the client can accept separately.
    """
    lines = []
    lines.append("COURT SURFACING QUOTE")
    lines.append("=" * 72)
    lines.append(f"Generated: {datetime.now().isoformat(timespec='seconds')}")
    if customer_name:
        lines.append(f"Customer: {customer_name}")
    lines.append(f"Project: {quote_project_name(project_name, estimate)}")
    lines.append(f"Area: {estimate.square_footage:,.0f} sq ft")
    lines.append("")

    sections = estimate.materials.sections + [
        estimate.color_coat.materials,
        estimate.color_coat.installation,
        estimate.color_coat.lining,
        estimate.labor.labor,
        estimate.labor.travel,
    ]
    for section in sections:
        if not section.subtotal:
            continue
        lines.append(section.name.upper())
        lines.append("-" * 72)
        lines.extend(_section_lines(section))
        lines.append("")

    lines.append("TOTALS")
    lines.append("-" * 72)
    lines.append(f"Base cost:          {estimate.base_total:>12.2f}")
    lines.append(f"Sales tax ({estimate.tax_rate * 100:>4.1f}%): {estimate.tax_amount:>12.2f}")
    lines.append(f"Margin ({estimate.margin_rate * 100:>4.1f}%):    {estimate.margin_amount:>12.2f}")
    lines.append(f"TOTAL:              {estimate.total:>12.2f}")
    if estimate.price_per_sqft:
        lines.append(f"Per sq ft:          {estimate.price_per_sqft:>12.2f}")
    lines.append("")

    if estimate.packages:
        lines.append("OPTIONAL EQUIPMENT PACKAGES")
        lines.append("-" * 72)
        for package in estimate.packages:
            lines.append(package.title)
            for item in package.items:
                lines.append(f"  {item.description:<54} = {item.subtotal:>10.2f}")
            lines.append(f"  {'Package total':<54} = {package.total:>10.2f}")
        lines.append("")

    if estimate.warnings:
        lines.append("NOTES")
        lines.append("-" * 72)
        for warning in estimate.warnings:
            lines.append(f"  * {warning}")
        lines.append("")

    lines.append("Thank you for your business.")

    content = "\n".join(lines) + "\n"
    quote_bytes = content.encode("utf-8")

    if output_path:
        with open(output_path, "wb") as f:
            f.write(quote_bytes)

    return quote_bytes
