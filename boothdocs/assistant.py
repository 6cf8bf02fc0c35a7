"""
Show content generation.

Short one-shot prompts built from a show's details: booth talking points,
LinkedIn posts, lead follow-up emails, post-show reports and packing
checklists. Uses the same AnalysisClient and retry policy as document
analysis, with its own system prompt.
"""

import json
from dataclasses import dataclass, field
from enum import Enum

from boothdocs.analysis.client import AnalysisClient
from boothdocs.analysis.errors import InvalidRequestError
from boothdocs.analysis.retry import RetryController
from boothdocs.logging_config import debug_log

CONTENT_SYSTEM_PROMPT = (
    "You are a trade show expert helping users prepare for and execute successful trade shows."
)


class ContentKind(Enum):
    TALKING_POINTS = "talking_points"
    SOCIAL_POST = "social_post"
    FOLLOW_UP_EMAIL = "follow_up_email"
    POST_SHOW_REPORT = "post_show_report"
    CHECKLIST = "checklist"


@dataclass
class ShowContext:
    """
    Details of one show used to fill content prompts.

    Every field is optional; missing values get neutral placeholders.
    """

    show_name: str | None = None
    location: str | None = None
    dates: str | None = None
    products: str | None = None
    audience: str | None = None
    lead_name: str | None = None
    lead_notes: str | None = None
    metrics: dict[str, float] = field(default_factory=dict)
    extra: str | None = None


_TEMPLATES = {
    ContentKind.TALKING_POINTS: """Generate 5-7 compelling talking points for a trade show booth.

Show: {show_name}
Location: {location}
Dates: {dates}
Products/Services: {products}
Target Audience: {audience}

Generate conversation starters and key value propositions that will resonate with this audience. Be specific and actionable.""",

    ContentKind.SOCIAL_POST: """Generate 3 engaging LinkedIn posts about attending a trade show.

Show: {show_name}
Location: {location}
Dates: {dates}
{extra_line}

Create posts that are professional but engaging, include relevant hashtags, and encourage booth visits. Vary the tone: one more casual, one informative, one with a call-to-action.""",

    ContentKind.FOLLOW_UP_EMAIL: """Write a personalized follow-up email after meeting someone at a trade show.

Show: {show_name}
Lead Name: {lead_name}
Notes from conversation: {lead_notes}
{extra_line}

The email should:
1. Reference the specific conversation
2. Provide value (not just "checking in")
3. Have a clear call-to-action
4. Be concise (under 150 words)""",

    ContentKind.POST_SHOW_REPORT: """Create an executive summary report for a trade show.

Show: {show_name}
Location: {location}
Dates: {dates}
Metrics: {metrics}
{extra_line}

Include:
1. Executive Summary (2-3 sentences)
2. Key Metrics & Performance
3. Top Highlights
4. Challenges & Lessons Learned
5. Recommendations for Future Shows

Be specific and data-driven where possible.""",

    ContentKind.CHECKLIST: """Generate a comprehensive packing/preparation checklist for a trade show.

Show: {show_name}
Location: {location}
Dates: {dates}
{extra_line}

Categories to cover:
1. Booth Materials & Displays
2. Marketing Collateral
3. Technology & Equipment
4. Personal Items for Staff
5. Documentation & Paperwork
6. Emergency/Backup Items

Format as a clean checklist with checkboxes (- [ ]).""",
}

# Label for the free-form context line, per kind
_EXTRA_LABELS = {
    ContentKind.SOCIAL_POST: "Additional context",
    ContentKind.FOLLOW_UP_EMAIL: "Additional context",
    ContentKind.POST_SHOW_REPORT: "Additional notes",
    ContentKind.CHECKLIST: "Specific needs",
}


def build_content_prompt(kind: ContentKind, context: ShowContext) -> str:
    """Fill the template for one content kind."""
    label = _EXTRA_LABELS.get(kind)
    extra_line = f"{label}: {context.extra}" if label and context.extra else ""

    prompt = _TEMPLATES[kind].format(
        show_name=context.show_name or "Trade Show",
        location=context.location or "N/A",
        dates=context.dates or "N/A",
        products=context.products or "Not specified",
        audience=context.audience or "General attendees",
        lead_name=context.lead_name or "Contact",
        lead_notes=context.lead_notes or "Met at booth, expressed interest",
        metrics=json.dumps(context.metrics, indent=2),
        extra_line=extra_line,
    )
    # Drop the blank line left by an absent context line
    return prompt.replace("\n\n\n", "\n\n")


class ContentGenerator:
    """
    Generates show content through the analysis backend.

    Example:
        generator = ContentGenerator(client)
        text = generator.generate("checklist", ShowContext(show_name="CES 2027"))
    """

    def __init__(self, client: AnalysisClient, retry: RetryController | None = None):
        self.client = client
        self.retry = retry or RetryController()

    def generate(self, kind: ContentKind | str, context: ShowContext) -> str:
        """
        Generate one piece of content.

        Raises:
            InvalidRequestError: Unknown content kind
            AnalysisError: If the backend call failed after retries
        """
        kind = self._parse_kind(kind)
        prompt = build_content_prompt(kind, context)

        outcome = self.retry.run(
            lambda: self.client.generate(prompt, system_prompt=CONTENT_SYSTEM_PROMPT, label=kind.value),
            label=kind.value,
        )
        if not outcome.succeeded:
            raise outcome.value.to_error()

        debug_log(f"[ContentGenerator] {kind.value}: {len(outcome.value)} chars in {outcome.attempts} attempt(s)")
        return outcome.value

    def _parse_kind(self, kind: ContentKind | str) -> ContentKind:
        if isinstance(kind, ContentKind):
            return kind
        try:
            return ContentKind(kind)
        except ValueError:
            valid = ", ".join(k.value for k in ContentKind)
            raise InvalidRequestError(f"Unknown content type '{kind}'. Expected one of: {valid}")


def check_connection(client: AnalysisClient) -> tuple[bool, str | None]:
    """
    Confirm the backend accepts this client's credentials.

    Returns:
        (True, None) on success, else (False, user-facing error message)
    """
    ok, message = client.check_connection()
    debug_log(f"[Assistant] Connection check: {'ok' if ok else message}")
    return ok, message
