import json
import os
from typing import Dict, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

from .models import GenerationResult, Schedule

SCHEDULE_TABLE_COLUMNS = [
    "courseId", "courseName", "category", "subCategory", "creditHours", "isLab", "section", "days", "time",
]


def export_generation_result(result: GenerationResult) -> Dict[str, dict]:
    """
    Split a generation result into the documents handed to collaborators.

    Returns:
        {"success": bool, "error": message or None,
         "schedule": schedule document or None,
         "metrics": metrics document or None,
         "log": diagnostics document}
    """
    summary = result.log.summary() if result.log is not None else dict(result.details)
    schedule_doc = None
    if result.schedule is not None:
        schedule_doc = result.schedule.as_dict()
    return {
        "success": result.success,
        "error": result.error or None,
        "schedule": schedule_doc,
        "metrics": result.metrics.as_dict() if result.metrics is not None else None,
        "log": summary,
    }


def save_schedule_to_json(document, filename="schedule.json"):
    """
    Saves a document (schedule, metrics or log) to a JSON file.

    Parameters:
        document (dict): JSON-serialisable document
        filename (str): Output filename

    Returns:
        None
    """
    with open(filename, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False, default=str)
    print(f"Saved {filename}")


def schedule_to_frame(schedule: Schedule) -> pd.DataFrame:
    return pd.DataFrame([sc.as_dict() for sc in schedule], columns=SCHEDULE_TABLE_COLUMNS)


def save_schedule_csv(schedule: Schedule, filename="schedule.csv"):
    schedule_to_frame(schedule).to_csv(filename, index=False)
    print(f"Saved {filename}")


def plot_category_distribution(distribution: Dict[str, float], filename="category_distribution.png",
                               title: Optional[str] = None):
    """Bar chart of the share of each technical subcategory, in percent."""
    labels = list(distribution.keys())
    values = [distribution[k] for k in labels]

    fig, ax = plt.subplots(figsize=(8, 5))
    bars = ax.bar(labels, values, color=plt.get_cmap("tab10").colors[:len(labels)], zorder=3)
    for bar, value in zip(bars, values):
        ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height() + 1, f"{value:.0f}%",
                ha="center", va="bottom", fontsize=10)
    ax.set_ylim(0, 110)
    ax.set_ylabel("Share of scheduled courses (%)")
    ax.set_xlabel("Subcategory")
    if title:
        ax.set_title(title)
    ax.grid(axis="y", linestyle="--", alpha=0.5, zorder=0)
    fig.tight_layout()
    fig.savefig(filename, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved {filename}")


def save_outputs(result: GenerationResult, output_dir: str) -> Dict[str, str]:
    """Write every output document of one run into output_dir; returns name -> path."""
    docs = export_generation_result(result)
    paths = {"log": os.path.join(output_dir, "schedule_log.json")}
    save_schedule_to_json(docs["log"], paths["log"])
    if result.log is not None:
        paths["trace"] = os.path.join(output_dir, "schedule_debug.txt")
        result.log.save(paths["trace"])

    if not result.success:
        return paths

    paths["schedule"] = os.path.join(output_dir, "schedule.json")
    save_schedule_to_json(docs["schedule"], paths["schedule"])
    paths["metrics"] = os.path.join(output_dir, "metrics.json")
    save_schedule_to_json(docs["metrics"], paths["metrics"])
    paths["table"] = os.path.join(output_dir, "schedule.csv")
    save_schedule_csv(result.schedule, paths["table"])
    paths["chart"] = os.path.join(output_dir, "category_distribution.png")
    plot_category_distribution(result.metrics.category_distribution, paths["chart"],
                               title=f"Subcategory distribution, {result.schedule.semester}")
    return paths
