from datetime import datetime
from pathlib import Path


def get_target_run_folder(application_name: str, base_dir: str = "./runs") -> Path:
    # runs/<application>/<timestamp>, created on demand
    target = Path(base_dir) / application_name / datetime.now().strftime('%Y%m%d_%H%M%S')
    target.mkdir(parents=True, exist_ok=True)
    return target
