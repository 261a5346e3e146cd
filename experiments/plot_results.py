"""
Plot runtime analysis results with a fitted linear model.

Every pipeline stage touches each pixel a bounded number of times, so
runtime should grow linearly with the pixel count.
"""

import csv
import sys

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from scipy.optimize import curve_fit


def load_runtime_data(csv_path: str):
    """Load runtime data from CSV."""
    pixels = []
    times = []
    with open(csv_path, 'r') as f:
        reader = csv.DictReader(f)
        for row in reader:
            pixels.append(int(row['pixels']))
            times.append(float(row['time_ms']))
    return np.array(pixels, dtype=np.float64), np.array(times)


def fit_linear(pixels, times):
    """
    Fit T(N) = a * N + b.

    Returns:
        Tuple of (a, b, r_squared, model)
    """
    def model(N, a, b):
        return a * N + b

    params, _ = curve_fit(model, pixels, times, p0=[1e-4, 0])
    a, b = params

    residuals = times - model(pixels, a, b)
    ss_res = np.sum(residuals ** 2)
    ss_tot = np.sum((times - np.mean(times)) ** 2)
    r_squared = 1 - (ss_res / ss_tot) if ss_tot > 0 else 1.0
    return a, b, r_squared, model


def plot_runtime_vs_pixels(pixels, times, output_path: str):
    a, b, r_squared, model = fit_linear(pixels, times)

    pixels_smooth = np.linspace(pixels.min(), pixels.max(), 100)

    plt.figure(figsize=(10, 6))
    plt.scatter(pixels, times, s=100, alpha=0.7, color='blue',
                label='Measured runtime', zorder=3)
    plt.plot(pixels_smooth, model(pixels_smooth, a, b), 'r-', linewidth=2,
             label=f'Linear fit (R² = {r_squared:.4f})', zorder=2)
    plt.xlabel('Number of Pixels (N)', fontsize=12)
    plt.ylabel('Runtime (milliseconds)', fontsize=12)
    plt.title('Page Analysis Runtime vs Page Size', fontsize=14)
    plt.grid(True, alpha=0.3)
    plt.legend(fontsize=11)
    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    plt.close()

    print(f"Saved plot to {output_path}")
    print(f"  T(N) = {a:.3e} * N + {b:.2f} ms, R² = {r_squared:.4f}")


if __name__ == "__main__":
    csv_path = sys.argv[1] if len(sys.argv) > 1 else "experiments/runtime_data.csv"
    out_path = sys.argv[2] if len(sys.argv) > 2 else "experiments/runtime_vs_pixels.png"
    pixels, times = load_runtime_data(csv_path)
    plot_runtime_vs_pixels(pixels, times, out_path)
