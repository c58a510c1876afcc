"""Prompt text for position generation and debater turns."""

POSITIONS_SYSTEM_PROMPT = (
    "You are a debate moderator helping to identify diverse positions on a topic."
)

RESEARCH_SYSTEM_PROMPT = (
    "You are a debater preparing to argue for a specific position. "
    "Think through your key arguments and evidence."
)

OPENING_SYSTEM_PROMPT = "You are a skilled debater presenting your opening statement."

DEBATE_SYSTEM_PROMPT = (
    "You are a skilled debater in an active debate. "
    "Engage with other participants' arguments."
)


def positions_prompt(topic: str) -> str:
    return f"""Given the topic "{topic}", suggest 2 distinct, opposing positions that could be argued. Each position should be:
- Clear and specific
- Genuinely debatable (not obviously right or wrong)
- Directly opposing each other
- Able to be defended with logical arguments

Return ONLY a JSON array of 2 position strings, like: ["position 1", "position 2"]"""


def research_prompt(topic: str, position: str) -> str:
    return f"""Topic: {topic}
Your Position: {position}

Think through your key arguments for this position. Consider:
- Main points that support your position
- Potential counterarguments and how to address them
- Evidence or reasoning you'll use
- Your overall debate strategy

Share your research and preparation thoughts (2-3 paragraphs)."""


def opening_prompt(topic: str, position: str) -> str:
    return f"""Topic: {topic}
Your Position: {position}

Give a compelling 2-3 minute opening statement for your position. Your statement should:
- Clearly state your position
- Present your strongest arguments
- Be persuasive and engaging
- Set the tone for the debate"""


def debate_turn_prompt(
    topic: str,
    position: str,
    round_number: int,
    max_rounds: int,
    recent_discussion: str,
) -> str:
    return f"""Topic: {topic}
Your Position: {position}
Round: {round_number} of {max_rounds}

Recent discussion:
{recent_discussion}

Your turn: Continue the debate. You may:
- Respond to another participant's argument
- Make a new point supporting your position
- Ask a question to another participant
- Challenge an opposing view

Keep your response focused and impactful (2-3 paragraphs)."""


def format_message_line(name: str, position: str, content: str) -> str:
    """Render one transcript line as ``name (position): content``."""
    return f"{name} ({position}): {content}"
