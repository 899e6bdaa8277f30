# spendsense/core/charts.py
import io
from typing import Any, Dict, List, Union

import matplotlib

matplotlib.use("Agg")  # no display on the server

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from spendsense.utils.text_utils import format_peso

# Global chart settings
plt.rcParams['font.family'] = 'sans-serif'
plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14
plt.rcParams['legend.fontsize'] = 10

# Same palette as the category badges in the UI
CATEGORY_COLORS = {
    'food': '#ef4444',
    'transportation': '#3b82f6',
    'school': '#eab308',
    'entertainment': '#a855f7',
    'shopping': '#ec4899',
    'utilities': '#f97316',
    'health': '#22c55e',
    'other': '#6b7280',
}
TREND_COLOR = '#16a34a'


def _to_png(fig) -> io.BytesIO:
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150)
    buf.seek(0)
    plt.close(fig)
    return buf


def generate_category_chart(breakdown: List[Dict[str, Any]]) -> Union[io.BytesIO, None]:
    """Pie chart of spending per category (rows from reports.category_breakdown)."""
    rows = [row for row in breakdown if row.get('amount', 0) > 0]
    if not rows:
        return None

    labels = [row['name'] for row in rows]
    values = [row['amount'] for row in rows]
    colors = [CATEGORY_COLORS.get(str(row['category']).lower(), CATEGORY_COLORS['other']) for row in rows]

    fig, ax = plt.subplots(figsize=(7, 7))
    ax.pie(values, labels=labels, colors=colors, autopct='%1.1f%%', startangle=90,
           wedgeprops={'linewidth': 1, 'edgecolor': 'white'})
    ax.set_title('Spending by Category', fontweight='bold')
    ax.axis('equal')
    fig.tight_layout()
    return _to_png(fig)


def generate_trend_chart(series: List[Dict[str, Any]], title: str = 'Spending Trend') -> Union[io.BytesIO, None]:
    """Line chart of totals per day or month (points from reports.chart_series)."""
    if not series or not any(point['total'] > 0 for point in series):
        return None

    labels = [point['label'] for point in series]
    totals = [point['total'] for point in series]

    fig, ax = plt.subplots(figsize=(12, 6))
    ax.plot(range(len(totals)), totals, color=TREND_COLOR, linewidth=2, marker='o', markersize=4)
    ax.fill_between(range(len(totals)), totals, color=TREND_COLOR, alpha=0.1)

    # Label every point for short series, every fifth otherwise
    step = 1 if len(labels) <= 12 else 5
    ax.set_xticks(range(0, len(labels), step))
    ax.set_xticklabels(labels[::step], rotation=45, ha='right')

    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda value, _pos: format_peso(value)))
    ax.set_title(title, fontweight='bold')
    ax.set_ylabel('Amount (₱)')
    ax.grid(axis='y', linestyle='--', alpha=0.7)
    fig.tight_layout()
    return _to_png(fig)
