import sys
from pathlib import Path

# Ensure we import the repo-local diffxml (not a pip-installed one).
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

import diffxml  # noqa: E402
from diffxml.delta import decode  # noqa: E402


def main():
    before = (
        '<report status="draft">'
        '<section id="findings"><p>Lungs clear.</p><p>Bones intact.</p></section>'
        '<section id="notes"><!--todo--></section>'
        '</report>'
    )
    after = (
        '<report status="final">'
        '<section id="notes"/>'
        '<section id="findings"><p>Bones intact.</p><p>Lungs <b>clear</b>.</p></section>'
        '</report>'
    )

    delta = diffxml.diff_xml(before, after)
    print(delta)
    print("operations:", [op.tag for op in decode(delta)])

    out = diffxml.patch_xml(before, delta)
    print(out)
    print("matches target:", out == after)


if __name__ == "__main__":
    main()
