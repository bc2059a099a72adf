# eudr_compliance/visualisations.py
from typing import Iterable, Optional

import plotly.graph_objects as go

from .history import score_trend
from .models import AssessmentRecord, ComplianceResult, Severity
from .scoring import LOW_RISK_THRESHOLD, MEDIUM_RISK_THRESHOLD

RISK_COLOURS = {
    "High": "#c62828",
    "Medium": "#f9a825",
    "Low": "#2d5016",
}

SEVERITY_COLOURS = {
    Severity.CRITICAL: "#b71c1c",
    Severity.HIGH: "#ef6c00",
    Severity.MEDIUM: "#fbc02d",
    Severity.LOW: "#81c784",
}

BREAKDOWN_LABELS = [
    ("country_risk", "Country"),
    ("commodity_risk", "Commodity"),
    ("supplier_risk", "Supplier"),
    ("traceability_risk", "Traceability"),
    ("documentation_risk", "Documentation & GPS"),
]


def create_score_gauge(result: ComplianceResult, title: str = "EUDR Readiness Score") -> go.Figure:
    """Gauge with traffic light bands at the risk level thresholds."""
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=result.score,
        domain={'x': [0, 1], 'y': [0, 1]},
        title={'text': f"{title}<br><sub>{result.risk_level.value} risk</sub>", 'font': {'size': 22, 'family': 'Inter'}},
        number={'font': {'size': 56, 'family': 'Inter'}},
        gauge={
            'axis': {'range': [0, 100], 'tickwidth': 2, 'tickcolor': "#ccc"},
            'bar': {'color': RISK_COLOURS[result.risk_level.value], 'thickness': 0.25},
            'bgcolor': "white",
            'borderwidth': 3,
            'bordercolor': "#e0e0e0",
            'steps': [
                {'range': [0, MEDIUM_RISK_THRESHOLD], 'color': '#ffebee'},
                {'range': [MEDIUM_RISK_THRESHOLD, LOW_RISK_THRESHOLD], 'color': '#fff9c4'},
                {'range': [LOW_RISK_THRESHOLD, 100], 'color': '#e8f5e9'}
            ],
            'threshold': {
                'line': {'color': "#2c5f2d", 'width': 4},
                'thickness': 0.75,
                'value': result.score
            }
        }
    ))

    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font={'color': "#333", 'family': "Inter"},
        height=320,
        margin=dict(l=20, r=20, t=80, b=20)
    )

    return fig


def create_deduction_bar(result: ComplianceResult) -> go.Figure:
    """Horizontal bars showing points lost per risk bucket."""
    breakdown = result.score_breakdown
    labels = [label for _, label in BREAKDOWN_LABELS]
    values = [getattr(breakdown, name) for name, _ in BREAKDOWN_LABELS]

    fig = go.Figure(go.Bar(
        x=values,
        y=labels,
        orientation='h',
        marker_color=['#c62828' if v >= 25 else '#f9a825' if v > 0 else '#4caf50' for v in values],
        text=[f"-{v}" for v in values],
        textposition='outside',
        hovertemplate='<b>%{y}</b><br>Deduction: %{x} points<extra></extra>'
    ))

    fig.update_layout(
        title=dict(text="Points Deducted by Risk Factor", font=dict(size=20, family='Inter')),
        xaxis=dict(range=[0, max(values + [30]) + 10], title="Points", gridcolor='#e0e0e0'),
        yaxis=dict(autorange="reversed"),
        paper_bgcolor="white",
        plot_bgcolor="white",
        font=dict(family="Inter", size=13),
        height=350,
        margin=dict(l=140, r=30, t=60, b=50)
    )

    return fig


def create_gap_severity_donut(result: ComplianceResult) -> go.Figure:
    """Donut chart counting gaps per severity."""
    severities = [s for s in Severity if any(g.severity == s for g in result.gaps)]
    counts = [sum(1 for g in result.gaps if g.severity == s) for s in severities]

    fig = go.Figure(data=[go.Pie(
        labels=[s.value for s in severities],
        values=counts,
        hole=0.4,
        sort=False,
        marker=dict(colors=[SEVERITY_COLOURS[s] for s in severities], line=dict(color='white', width=3)),
        textinfo='label+value',
        textfont=dict(size=15, family='Inter'),
        hovertemplate='<b>%{label}</b><br>Gaps: %{value}<br>%{percent}<extra></extra>'
    )])

    fig.add_annotation(
        text=f"<b>{len(result.gaps)}</b><br>gaps",
        x=0.5, y=0.5,
        font=dict(size=20, family='Inter'),
        showarrow=False
    )

    fig.update_layout(
        showlegend=True,
        paper_bgcolor="white",
        font=dict(family="Inter"),
        height=350,
        margin=dict(l=20, r=120, t=40, b=20)
    )

    return fig


def create_history_line_chart(records: Iterable[AssessmentRecord], company: Optional[str] = None) -> go.Figure:
    """Readiness score over successive assessments."""
    trend = score_trend(records, company=company)

    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=trend["timestamp"],
        y=trend["score"],
        mode='lines+markers+text',
        name='Readiness Score',
        line=dict(color='#28a745', width=4),
        marker=dict(size=14, color=[RISK_COLOURS[r] for r in trend["risk_level"]],
                    line=dict(width=2, color='white')),
        text=[f"{s:.0f}" for s in trend["score"]],
        textposition="top center",
        fill='tozeroy',
        fillcolor='rgba(40, 167, 69, 0.15)',
        hovertemplate='<b>%{x}</b><br>Score: %{y}/100<extra></extra>'
    ))

    fig.add_hline(y=LOW_RISK_THRESHOLD, line_dash="dot", line_color="#2d5016")
    fig.add_hline(y=MEDIUM_RISK_THRESHOLD, line_dash="dot", line_color="#c62828")

    fig.update_layout(
        title=dict(text="Readiness Score History", font=dict(size=20, family='Inter')),
        xaxis_title="Assessment date",
        yaxis_title="Score",
        yaxis=dict(range=[0, 105], gridcolor='#e0e0e0'),
        xaxis=dict(gridcolor='#e0e0e0'),
        paper_bgcolor="white",
        plot_bgcolor="white",
        font=dict(family="Inter", size=14),
        hovermode='x unified',
        height=380,
        margin=dict(l=50, r=30, t=60, b=50)
    )

    return fig
