"""Prompt text for caregiver reports and idle encouragement."""

from __future__ import annotations

from colorcare.session.metrics import SessionMetrics

ENCOURAGEMENT_PROMPT = (
    "You are a supportive caregiver assistant. A person living with dementia "
    "has paused during a coloring activity. Write a short, warm message of "
    "two or three simple sentences that gently invites them to keep going."
)

_ANALYSIS_TEMPLATE = """\
You are a clinical neuropsychologist. A person living with dementia colored \
a picture{subject}.

Session metrics:
- Neglect ratio: {neglect:.3f} (share of actions on the left half; 0.5 is \
balanced, values near 0 suggest left-sided neglect, values near 1 suggest \
right-sided neglect)
- Quadrant activity:
  * Top-left: {tl:.1f}%
  * Top-right: {tr:.1f}%
  * Bottom-left: {bl:.1f}%
  * Bottom-right: {br:.1f}%
- Tremor score: {tremor:.3f} (share of pointer steps that were tiny \
jitters; higher means less stable)
- Idle nudges: {nudges}
- Time spent: {minutes:.1f} minutes

Use the quadrant distribution to look for horizontal neglect (left versus \
right) and vertical or altitudinal neglect (top versus bottom). A strong \
right-side bias points to left-sided neglect; activity concentrated in the \
lower part of the canvas can point to vertical gaze limits.

Write exactly three sentences for a family caregiver:
1. Spatial attention, naming any horizontal, vertical or single-quadrant bias.
2. Motor control and hand steadiness, based on the tremor score.
3. Engagement, based on the nudges and time spent.

Keep the language clear, compassionate and free of jargon."""


def build_analysis_prompt(metrics: SessionMetrics, context: str | None = None) -> str:
    """Render the caregiver-summary prompt for a finished session.

    Args:
        metrics: Finalized session metrics.
        context: Optional free text describing what was colored.
    """
    q = metrics.quadrant_activity
    return _ANALYSIS_TEMPLATE.format(
        subject=f" of {context}" if context else "",
        neglect=metrics.neglect_ratio,
        tl=q.top_left,
        tr=q.top_right,
        bl=q.bottom_left,
        br=q.bottom_right,
        tremor=metrics.tremor_score,
        nudges=metrics.nudge_count,
        minutes=metrics.total_time_seconds / 60.0,
    )
