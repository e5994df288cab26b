from pathlib import Path
import sys

# Ensure project root on sys.path for direct script execution
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from agenda.cli.main import run_edit_script


def main() -> None:
    script = root / "data" / "edits" / "example.json"
    save = "--no-save" not in sys.argv[1:]
    validation, audit = run_edit_script(root, script, save=save)
    print(validation)
    print(audit)


if __name__ == "__main__":
    # The Typer app is available via `python -m agenda.cli.main` too.
    main()
