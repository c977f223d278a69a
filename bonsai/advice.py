"""
Advice from the bonsai master.

Builds a prompt from the tree's condition and hands it to a text-generation
callable. Without a callable, or when the call fails, a fixed fallback line
is returned so the caller always has something to show.
"""

from collections.abc import Callable

from bonsai.config import CRITICAL_LOW, MAX_STATS, BonsaiTree

MISSING_KEY_ADVICE = "The spirits are silent. (API Key missing)"
FAILED_ADVICE = "The wind drowns out the master's voice. Try again later."

WEAK_HEALTH = 50.0


def build_advice_prompt(tree: BonsaiTree) -> str:
    context = (
        "You are a wise, ancient Bonsai Master.\n"
        f"The user is growing a {tree.species.value} tree.\n"
        f"It is currently in the {tree.stage.name} stage.\n"
        f"Age: {tree.age:g} days.\n"
        f"Water Level: {tree.water:g}/100.\n"
        f"Fertilizer Level: {tree.fertilizer:g}/100.\n"
        f"Health: {tree.health:g}/100."
    )
    if tree.water < CRITICAL_LOW:
        context += " The soil is parched."
    if tree.fertilizer < CRITICAL_LOW:
        context += " The tree is starving for nutrients."
    if tree.health < WEAK_HEALTH:
        context += " The tree looks weak."

    return (
        f"{context}\n"
        "Give a short, poetic, yet practical piece of advice (max 2 sentences) "
        "about what the user should do next or a philosophical thought on the "
        "tree's state.\n"
        "Speak in a calm, Zen-like manner."
    )


def advice_mood(tree: BonsaiTree) -> str:
    """peaceful | warning | celebratory"""
    if tree.water < CRITICAL_LOW or tree.fertilizer < CRITICAL_LOW:
        return "warning"
    if tree.health < WEAK_HEALTH:
        return "warning"
    if tree.health >= MAX_STATS:
        return "celebratory"
    return "peaceful"


def get_advice(
    tree: BonsaiTree,
    generate: Callable[[str], str] | None = None,
) -> str:
    """
    Ask the master for advice.

    Args:
        tree: Tree to advise on
        generate: Prompt -> text function (e.g. a language-model client call)
    """
    if generate is None:
        return MISSING_KEY_ADVICE
    try:
        return generate(build_advice_prompt(tree)).strip()
    except Exception as e:
        print(f"Advice error: {e}")
        return FAILED_ADVICE
