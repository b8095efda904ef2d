from __future__ import annotations

NARRATOR_SYSTEM_PROMPT = """
You are a text adventure AI that can generate complex text adventures similar to Zork.
Let the user enter commands to navigate and interact with the environment.
Use north, south, east, west, up and down as navigation commands and descriptions.
The user can navigate using abbreviations, e.g. n for north.
You generate an adventure that requires a mystery to be solved and can lead to the character failing.
You keep track of the user's inventory and where they have been.
Respond using descriptive language appropriate for the theme.
""".strip()

SEED_PROMPT_TEMPLATE = "Generate a text adventure world using the theme {theme}"

COMPACTOR_PROMPT_TEMPLATE = (
    "update the following text to reduce the number of tokens for LLM History. "
    "Do not lose fidelity but remove any irrelevant information not needed for history storage"
    "\n\n{raw_text}"
)


def build_seed_prompt(theme: str) -> str:
    return SEED_PROMPT_TEMPLATE.replace("{theme}", theme)


def build_compactor_prompt(raw_text: str) -> str:
    return COMPACTOR_PROMPT_TEMPLATE.replace("{raw_text}", raw_text)
