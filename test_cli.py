"""Test the command-line driver and word evaluation."""

import json
import os

from pagewords.cli import draw_overlay, main
from pagewords.evaluate import evaluate_dir, evaluate_one, evaluate_words, greedy_match, load_boxes
from pagewords.evaluate import main as evaluate_main
from pagewords.main import analyze_page
from pagewords.segment import Box
from pagewords.synthetic import generate_synthetic_page, save_page


def _write_page(tmp_path):
    page = generate_synthetic_page(width=600, height=800, columns=2, seed=3)
    path = str(tmp_path / "page.png")
    save_page(page, path)
    return page, path


def test_cli_writes_json_and_overlay(tmp_path, capsys):
    page, path = _write_page(tmp_path)
    json_path = str(tmp_path / "out" / "page.json")
    overlay_path = str(tmp_path / "out" / "overlay.png")

    assert main(["--image", path, "--save_json", json_path, "--save_overlay", overlay_path]) == 0

    with open(json_path) as f:
        dump = json.load(f)
    assert dump["background"] == {"r": 255, "g": 255, "b": 255}
    assert load_boxes(json_path) == page.words
    assert os.path.exists(overlay_path)
    assert "word:" in capsys.readouterr().out


def test_cli_config_and_overrides(tmp_path):
    page, path = _write_page(tmp_path)
    config_path = tmp_path / "config.yaml"
    config_path.write_text("paragraph_scope: region\n")
    json_path = str(tmp_path / "page.json")

    main(["--image", path, "--config", str(config_path), "--mark_line_wraps", "--save_json", json_path])

    with open(json_path) as f:
        kinds = {s["kind"] for s in json.load(f)["segments"]}
    assert {"word", "region_break", "paragraph_break", "line_spacer"} <= kinds


def test_greedy_match_pairs_best_overlap():
    preds = [Box(0, 0, 10, 10), Box(50, 50, 60, 60)]
    gts = [Box(1, 0, 10, 10)]
    mp, mg = greedy_match(preds, gts, 0.5)
    assert mp == [0, -1]
    assert mg == [0]


def test_evaluate_words():
    gts = [Box(0, 0, 10, 10), Box(20, 0, 30, 10)]
    perfect = evaluate_words(gts, gts)
    assert perfect["f1"] > 0.999
    half = evaluate_words(gts[:1], gts)
    assert half["tp"] == 1 and half["fn"] == 1 and half["fp"] == 0


def test_evaluate_files(tmp_path, capsys):
    pred = tmp_path / "pred.json"
    gt = tmp_path / "gt.json"
    pred.write_text(json.dumps([{"x0": 0, "y0": 0, "x1": 10, "y1": 10}]))
    gt.write_text(json.dumps([{"x0": 0, "y0": 0, "x1": 10, "y1": 10},
                              {"x0": 40, "y0": 0, "x1": 50, "y1": 10}]))
    assert evaluate_one(str(pred), str(gt), 0.5)["recall"] < 0.51

    evaluate_main(["--pred", str(pred), "--gt", str(gt)])
    assert json.loads(capsys.readouterr().out)["tp"] == 1


def test_evaluate_dir_skips_unpaired_files(tmp_path):
    pred_dir = tmp_path / "pred"
    gt_dir = tmp_path / "gt"
    pred_dir.mkdir()
    gt_dir.mkdir()
    box = [{"x0": 0, "y0": 0, "x1": 10, "y1": 10}]
    (pred_dir / "a.json").write_text(json.dumps(box))
    (gt_dir / "a.json").write_text(json.dumps(box))
    (pred_dir / "b.json").write_text(json.dumps(box))
    (gt_dir / "b.json").write_text(json.dumps([]))
    (pred_dir / "orphan.json").write_text(json.dumps(box))

    scores = evaluate_dir(str(pred_dir), str(gt_dir), 0.5)
    assert scores["tp"] == 0.5
    assert scores["fp"] == 0.5


def test_draw_overlay_outlines_words(ink_rect_page):
    overlay = draw_overlay(analyze_page(ink_rect_page))
    assert overlay.shape == (100, 100, 3)
    # red outline in BGR on the box border, untouched paper elsewhere
    assert tuple(overlay[20, 20]) == (0, 0, 255)
    assert tuple(overlay[24, 29]) == (0, 0, 255)
    assert tuple(overlay[5, 5]) == (255, 255, 255)
