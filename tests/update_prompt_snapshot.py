"""Utility to regenerate the prompt builder golden file."""

from __future__ import annotations

import json
from pathlib import Path

from autodiag.prompt_builder import build_prompt
from autodiag.types import Fragment

GOLDEN = Path(__file__).parent / "golden"


def main() -> None:  # pragma: no cover - manual utility
    data = json.loads((GOLDEN / "prompt_input.json").read_text())
    fragments = [Fragment(**item) for item in data["fragments"]]
    prompt = build_prompt(fragments)
    (GOLDEN / "prompt_output.txt").write_text(prompt.text)


if __name__ == "__main__":
    main()
