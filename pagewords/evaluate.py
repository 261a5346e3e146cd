import argparse
import json
import os
from typing import Dict, List, Sequence, Tuple

import numpy as np

from pagewords.segment import Box


def greedy_match(preds: Sequence[Box], gts: Sequence[Box], iou_thr: float) -> Tuple[List[int], List[int]]:
    """
    Pair predictions with ground-truth boxes, best IoU first.

    Returns:
        (pred -> gt index, gt -> pred index), -1 where unmatched
    """
    matches_pred = [-1] * len(preds)
    matches_gt = [-1] * len(gts)
    pairs = [(p.iou(g), i, j) for i, p in enumerate(preds) for j, g in enumerate(gts)]
    pairs = sorted((pair for pair in pairs if pair[0] >= iou_thr), reverse=True, key=lambda x: x[0])
    for _, i, j in pairs:
        if matches_pred[i] == -1 and matches_gt[j] == -1:
            matches_pred[i] = j
            matches_gt[j] = i
    return matches_pred, matches_gt


def evaluate_words(preds: Sequence[Box], gts: Sequence[Box], iou_thr: float = 0.5) -> Dict[str, float]:
    mp, mg = greedy_match(preds, gts, iou_thr)
    tp = sum(1 for m in mp if m != -1)
    fp = sum(1 for m in mp if m == -1)
    fn = sum(1 for m in mg if m == -1)
    prec = tp / (tp + fp + 1e-9)
    rec = tp / (tp + fn + 1e-9)
    f1 = 2 * prec * rec / (prec + rec + 1e-9)
    return {"precision": prec, "recall": rec, "f1": f1, "tp": tp, "fp": fp, "fn": fn}


def load_boxes(path: str) -> List[Box]:
    """Read word boxes from a JSON list, or from a page dump with a 'segments' key."""
    with open(path) as f:
        raw = json.load(f)
    if isinstance(raw, dict):
        raw = [s for s in raw.get("segments", []) if s.get("kind", "word") == "word"]
    return [Box(int(r["x0"]), int(r["y0"]), int(r["x1"]), int(r["y1"])) for r in raw]


def evaluate_one(pred_json: str, gt_json: str, iou_thr: float) -> Dict[str, float]:
    return evaluate_words(load_boxes(pred_json), load_boxes(gt_json), iou_thr)


def evaluate_dir(pred_dir: str, gt_dir: str, iou_thr: float) -> Dict[str, float]:
    """Average the scores of every prediction file that has a ground-truth twin."""
    scores: Dict[str, List[float]] = {}
    for name in sorted(os.listdir(pred_dir)):
        gt_path = os.path.join(gt_dir, name)
        if not name.endswith('.json') or not os.path.exists(gt_path):
            continue
        for key, value in evaluate_one(os.path.join(pred_dir, name), gt_path, iou_thr).items():
            scores.setdefault(key, []).append(value)
    return {key: float(np.mean(values)) for key, values in scores.items()}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Score predicted word boxes against ground truth")
    parser.add_argument("--pred", type=str, required=True, help="predicted boxes: JSON file or directory")
    parser.add_argument("--gt", type=str, required=True, help="ground-truth boxes: JSON file or directory")
    parser.add_argument("--iou", type=float, default=0.5, help="minimum IoU for a match")
    args = parser.parse_args(argv)

    if os.path.isdir(args.pred):
        scores = evaluate_dir(args.pred, args.gt, args.iou)
    else:
        scores = evaluate_one(args.pred, args.gt, args.iou)
    print(json.dumps(scores, indent=2))


if __name__ == "__main__":
    main()
