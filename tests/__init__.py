from pathlib import Path
import sys

# swap_parser lives under src/; allow running the suite from a plain checkout
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))
