"""
Runtime analysis for page word segmentation.
Measures analysis time on synthetic pages of increasing size.
"""

import csv
import os
import time
from typing import List, Tuple

import cv2
import numpy as np

from pagewords.main import analyze_page
from pagewords.synthetic import generate_synthetic_page


def scaled_page(scale_factor: float, columns: int, seed: int) -> Tuple[np.ndarray, int, int]:
    """
    Render a synthetic page and resize it by scale factor.

    Returns:
        Tuple of (rgba_pixels, width, height)
    """
    page = generate_synthetic_page(width=800, height=1000, columns=columns, seed=seed)
    h, w = page.pixels.shape[:2]
    new_w = int(w * scale_factor)
    new_h = int(h * scale_factor)
    resized = cv2.resize(page.pixels, (new_w, new_h), interpolation=cv2.INTER_AREA)
    return resized, new_w, new_h


def measure_runtime(scale_factor: float, columns: int = 2,
                    num_runs: int = 3) -> Tuple[float, int, int, int]:
    """
    Measure average runtime of analyze_page at given scale.

    Returns:
        Tuple of (avg_time_ms, width, height, num_words)
    """
    pixels, w, h = scaled_page(scale_factor, columns, seed=7)

    times = []
    num_words = 0
    for _ in range(num_runs):
        start_time = time.perf_counter()
        result = analyze_page(pixels)
        times.append((time.perf_counter() - start_time) * 1000)
        num_words = len(result.words())

    return float(np.mean(times)), w, h, num_words


def run_runtime_experiments(scale_factors: List[float],
                            output_csv: str = "experiments/runtime_data.csv",
                            columns: int = 2):
    print("=" * 70)
    print("RUNTIME ANALYSIS EXPERIMENTS")
    print("=" * 70)
    print(f"\nScale factors: {scale_factors}")
    print(f"Columns: {columns}")
    print()

    results = []
    for i, scale in enumerate(scale_factors):
        print(f"\n[{i+1}/{len(scale_factors)}] Testing scale {scale:.2f}...")
        avg_time, w, h, num_words = measure_runtime(scale, columns)
        pixels = w * h
        results.append({
            'scale': scale,
            'width': w,
            'height': h,
            'pixels': pixels,
            'time_ms': avg_time,
            'num_words': num_words
        })
        print(f"  Size: {w} x {h} ({pixels:,} pixels)")
        print(f"  Time: {avg_time:.2f} ms")
        print(f"  Words: {num_words}")

    if results:
        os.makedirs(os.path.dirname(output_csv) or ".", exist_ok=True)
        with open(output_csv, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=['scale', 'width', 'height',
                                                   'pixels', 'time_ms', 'num_words'])
            writer.writeheader()
            writer.writerows(results)
        print(f"\nResults saved to {output_csv}")

    return results


if __name__ == "__main__":
    run_runtime_experiments([0.5, 0.75, 1.0, 1.25, 1.5, 2.0])
