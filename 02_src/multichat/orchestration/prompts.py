"""Prompt builders for the comparison and summary stages."""

from ..models import Agent, Message

SEPARATOR_LINE = "-------------------------------------"

COMPARISON_SYSTEM_PROMPT = (
    "You are an expert analyst comparing arguments from multiple AI agents."
)

SUMMARY_SYSTEM_PROMPT = (
    "You are an AI assistant that ONLY outputs well-formatted Markdown tables "
    "based on the provided analysis. You do not output any other text or formatting."
)


def build_comparison_prompt(
    user_query: Message,
    responses: list[Message],
    target: Agent,
) -> str:
    """Ask ``target`` to compare every response to the user's query."""
    parts = [
        f'The user asked the following query: "{user_query.content}"\n\n',
        f"In response, several AI agents (including potentially yourself, "
        f"{target.name}) provided these arguments:\n\n",
    ]
    for response in responses:
        label = response.agent_name or response.agent_id
        if response.agent_id == target.id:
            label = f"{label} (your own response)"
        parts.append(f"--- Response from {label} ---\n")
        parts.append(f"{response.content}\n\n")
        parts.append(f"{SEPARATOR_LINE}\n\n")

    parts.append(f"--- Your Task ({target.name}) ---\n")
    parts.append(
        f"As {target.name}, please analyze all the arguments presented above in "
        "relation to the original user query. Evaluate their strengths, weaknesses, "
        "points of agreement, and points of divergence. Offer your unique perspective "
        "or synthesis based on the discussion so far. Focus on providing a comparative "
        "analysis. Respond with the user's language and tone in mind."
    )
    return "".join(parts)


def build_summary_prompt(user_query: Message, analyses: dict[str, str]) -> str:
    """Ask the summarizer for a single Markdown table.

    ``analyses`` maps each analysis display name to its full text.
    """
    parts = [
        f'The user asked: "{user_query.content}"\n\n',
        "Multiple agents provided analyses comparing initial responses. "
        "Here are their analyses:\n\n",
    ]
    for agent_name, content in analyses.items():
        parts.append(f"--- Analysis from {agent_name} ---\n")
        parts.append(f"{content}\n\n")
        parts.append(f"{SEPARATOR_LINE}\n\n")

    parts.append("--- Your Task (Summary Agent) ---\n")
    parts.append(
        "Based on all the preceding analyses, create ONLY a concise summary table in "
        "Markdown format. The table should highlight key strengths, weaknesses, "
        "agreements, and disagreements. IMPORTANT: Your entire response MUST be ONLY "
        'the Markdown table itself. Start directly with the table header row (e.g., '
        '"| Feature | Agent A | ... |") and end immediately after the last table row. '
        "Do not include any introductory text, explanations, code block fences (```), "
        "or concluding remarks."
    )
    return "".join(parts)
