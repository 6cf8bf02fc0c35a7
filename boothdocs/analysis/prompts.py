"""
Prompt templates for document analysis.

Three template families, one entry per AnalysisKind in each:
- DIRECT_PROMPTS: whole document in one request (no chunking)
- SECTION_PROMPTS: one section of a chunked document
- MERGE_PROMPTS: combine the section results into the final answer

Every AnalysisKind must have a template in every family; this is checked
when the module is imported.
"""

from .types import AnalysisKind

DIRECT_PROMPTS = {
    AnalysisKind.EXTRACT_DEADLINES: """Analyze this trade show document and extract ALL deadlines, dates, and time-sensitive requirements.

Document:
{document}

Format the output as a structured list with:
- Date/Deadline
- What it's for
- Any associated costs or penalties for missing it

Sort chronologically from soonest to latest.""",

    AnalysisKind.SUMMARIZE: """Summarize this trade show document, highlighting the most important information for an exhibitor.

Document:
{document}

Provide:
1. One-paragraph executive summary
2. Key requirements (bullet points)
3. Important contacts/resources mentioned
4. Any notable policies or restrictions""",

    AnalysisKind.EXTRACT_REQUIREMENTS: """Extract all requirements, rules, and specifications from this exhibitor document.

Document:
{document}

Categorize into:
1. Booth Setup Requirements
2. Electrical/Utility Requirements
3. Shipping/Drayage Requirements
4. Badge/Registration Requirements
5. Prohibited Items/Activities
6. Insurance/Liability Requirements

Be thorough - exhibitors need to know everything required of them.""",

    AnalysisKind.CUSTOM: """Analyze this document and answer the following question:

Question: {question}

Document:
{document}

Provide a clear, direct answer based only on information in the document. If the information isn't in the document, say so.""",
}

SECTION_PROMPTS = {
    AnalysisKind.EXTRACT_DEADLINES: """[Analyzing section {number} of {total}]

Extract ALL deadlines, dates, and time-sensitive requirements from this section of a trade show document.
This is only part of the document; do not assume anything about the other sections.

Document Section:
{document}

List each deadline with:
- Date/Deadline
- What it's for
- Any penalties mentioned

Only include items actually found in this section.""",

    AnalysisKind.SUMMARIZE: """[Analyzing section {number} of {total}]

Extract the KEY information from this section of a trade show document.
This is only part of the document; do not assume anything about the other sections.

Document Section:
{document}

List:
- Main topics covered
- Important requirements
- Key facts/numbers
- Contacts mentioned

Be concise - focus on what matters most for an exhibitor.""",

    AnalysisKind.EXTRACT_REQUIREMENTS: """[Analyzing section {number} of {total}]

Extract all requirements, rules, and specifications from this section.
This is only part of the document; do not assume anything about the other sections.

Document Section:
{document}

Include any requirements related to:
- Booth setup
- Electrical/utilities
- Shipping/drayage
- Badges/registration
- Prohibited items
- Insurance/liability

Only include items actually in this section.""",

    AnalysisKind.CUSTOM: """[Analyzing section {number} of {total}]

Based on this section, find information relevant to: {question}
This is only part of the document; do not assume anything about the other sections.

Document Section:
{document}

If this section contains relevant information, summarize it. If not, say "No relevant information in this section.\"""",
}

MERGE_PROMPTS = {
    AnalysisKind.EXTRACT_DEADLINES: """I've analyzed a large document in sections. Here are the deadlines found in each section:

{combined}

Now create a FINAL consolidated list of all deadlines:
1. Remove duplicates (same deadline mentioned in multiple sections)
2. Sort chronologically from soonest to latest
3. Format cleanly with date, description, and any penalties

Provide the final, deduplicated, sorted list.""",

    AnalysisKind.SUMMARIZE: """I've analyzed a large document in sections. Here are the key points from each:

{combined}

Now create a FINAL executive summary:
1. One-paragraph overview
2. Key requirements (deduplicated bullet points)
3. Important contacts/resources
4. Notable policies or restrictions

Synthesize into a cohesive summary, removing redundancy.""",

    AnalysisKind.EXTRACT_REQUIREMENTS: """I've analyzed a large document in sections. Here are the requirements from each:

{combined}

Now create a FINAL consolidated requirements list:
1. Merge and deduplicate requirements
2. Categorize into: Booth Setup, Electrical/Utility, Shipping/Drayage, Badges/Registration, Prohibited Items, Insurance/Liability
3. Remove redundant items

Provide the complete, organized requirements list.""",

    AnalysisKind.CUSTOM: """I've searched a large document in sections for: "{question}"

Here's what was found in each section:
{combined}

Now provide a FINAL consolidated answer:
1. Combine all relevant findings
2. Remove redundant information
3. Give a clear, direct answer

If nothing relevant was found, say so clearly.""",
}


def _check_templates() -> None:
    """Fail at import if any AnalysisKind lacks a template."""
    for name, table in (
        ("DIRECT_PROMPTS", DIRECT_PROMPTS),
        ("SECTION_PROMPTS", SECTION_PROMPTS),
        ("MERGE_PROMPTS", MERGE_PROMPTS),
    ):
        missing = set(AnalysisKind) - set(table)
        if missing:
            raise RuntimeError(f"{name} has no template for: {sorted(k.value for k in missing)}")


_check_templates()


def format_section_results(section_texts: list[tuple[int, str]]) -> str:
    """
    Join section outputs with numbered separators.

    Args:
        section_texts: (section number, text) pairs in section order

    Returns:
        Combined text, e.g. "--- Section 1 Results ---\\n..."
    """
    return "\n\n".join(f"--- Section {number} Results ---\n{text.strip()}" for number, text in section_texts)


def build_direct_prompt(kind: AnalysisKind, document: str, question: str | None = None) -> str:
    """Prompt for analyzing a whole document in one request."""
    return DIRECT_PROMPTS[kind].format(document=document, question=question or "")


def build_section_prompt(
    kind: AnalysisKind,
    document: str,
    number: int,
    total: int,
    question: str | None = None,
) -> str:
    """Prompt for one section; number is one-based."""
    return SECTION_PROMPTS[kind].format(
        document=document,
        number=number,
        total=total,
        question=question or "",
    )


def build_merge_prompt(kind: AnalysisKind, combined: str, question: str | None = None) -> str:
    """Prompt for the synthesis pass over already-formatted section results."""
    return MERGE_PROMPTS[kind].format(combined=combined, question=question or "")
