"""Build deterministic prompts from datasource fragments."""

from __future__ import annotations

from collections.abc import Sequence

from .types import Fragment, Prompt

INSTRUCTION = (
    "You are an AWS diagnostic assistant.\n"
    "You will be given pieces of information surrounded by `<data></data>` tags.\n"
    "Use this information to perform a diagnosis.\n"
    "Base your diagnosis on the provided information only.\n"
    "Use all of the information provided in your diagnosis.\n"
    "Structure your diagnosis per information, then provide a summary at the end.\n"
    "Format your response using Markdown.\n"
)

SECTION_OPEN = "<data>"
SECTION_CLOSE = "</data>"


def render_section(fragment: Fragment) -> str:
    """Return ``fragment`` wrapped in its delimiters under its title."""

    return (
        f"{SECTION_OPEN}\n"
        f"Information: [{fragment.title}]\n"
        f"{fragment.body.rstrip()}\n"
        f"{SECTION_CLOSE}\n"
    )


def build_prompt(fragments: Sequence[Fragment]) -> Prompt:
    """Return the prompt for ``fragments`` in the order given.

    The output depends only on the fragments, so identical input always
    yields byte-identical text. Nothing is truncated here.
    """

    text = "\n".join(render_section(fragment) for fragment in fragments)
    return Prompt(text=text, sections=len(fragments))


__all__ = ["INSTRUCTION", "build_prompt", "render_section"]
