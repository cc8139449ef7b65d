from __future__ import annotations

import json
import re
from pathlib import Path
import logging

from passoff.io.records import dump_rubric, dump_submission
from passoff.models.submission import Submission
from passoff.utils import rubric_to_markdown


def _slug(s: str) -> str:
    s = s.strip().lower()
    s = re.sub(r"[^\w\-]+", "-", s)
    s = re.sub(r"-{2,}", "-", s).strip("-")
    return s or "submission"


def _summary_md(sub: Submission) -> str:
    lines: list[str] = []
    lines.append(f"# Submission: {sub.net_id} / {sub.phase.value}")
    lines.append("")
    lines.append(f"- **Commit**: `{sub.head_hash}`")
    lines.append(f"- **Submitted**: {sub.timestamp.isoformat()}")
    lines.append(f"- **Passed**: {'✅' if sub.passed else '❌'}")
    lines.append(f"- **Score**: {sub.score:g}")
    lines.append(f"- **Status**: {sub.verified_status.value}")
    if sub.num_commits is not None:
        lines.append(f"- **Commits**: {sub.num_commits}")
    if sub.rubric is not None:
        lines.append("")
        lines.append("## Rubric")
        lines.append(rubric_to_markdown(sub.rubric))
        if sub.rubric.total_score is not None:
            lines.append(f"\n**Rubric total**: {sub.rubric.total_score:g}")
    if sub.notes:
        lines.append("\n## Notes")
        for n in sub.notes.splitlines():
            lines.append(f"- {n}")
    return "\n".join(lines) + "\n"


def write_submission_artifacts(artifacts_root: Path | str, sub: Submission) -> Path:
    """
    Write standard artifacts:
      - submission.json
      - rubric.json
      - summary.md
    under <root>/<net-id>/<phase>/<short-hash>/. Returns that directory.
    """
    root = Path(artifacts_root)
    sub_dir = root / _slug(sub.net_id) / _slug(sub.phase.value) / _slug(sub.head_hash[:12])
    sub_dir.mkdir(parents=True, exist_ok=True)

    (sub_dir / "submission.json").write_text(
        json.dumps(dump_submission(sub), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )

    rubric_payload = dump_rubric(sub.rubric) if sub.rubric is not None else None
    (sub_dir / "rubric.json").write_text(
        json.dumps(rubric_payload, indent=2, ensure_ascii=False), encoding="utf-8"
    )

    # summary.md (human friendly) + log via logger
    summary_text = _summary_md(sub)
    (sub_dir / "summary.md").write_text(summary_text, encoding="utf-8")
    logging.getLogger("passoff.artifacts").info("\n" + summary_text.rstrip())

    return sub_dir
