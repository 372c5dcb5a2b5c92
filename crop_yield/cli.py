"""
Crop Yield - Unified CLI

Usage:
    python -m crop_yield.cli <command> [options]

Commands:
    generate    Write a synthetic dataset to CSV
    train       Train a model on a CSV dataset
    predict     Predict yields for a CSV of observations
    evaluate    Score a saved model on a labeled CSV
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from . import data, ml_pipeline
from .baseline import RuleBasedYieldModel
from .config import MODEL
from .errors import CropYieldError

log = logging.getLogger("crop_yield")


# ═══════════════════════════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════════════════════════

def cmd_generate(args) -> int:
    records = data.generate_sample_dataset(args.count, seed=args.seed)
    path = data.save_dataset(records, args.output)
    print(f"Generated {len(records)} records -> {path}")
    return 0


def cmd_train(args) -> int:
    records = data.load_dataset(args.data)
    config = ml_pipeline.AlgorithmConfig(
        algorithm=args.algorithm,
        round_count=args.rounds,
        learning_rate=args.learning_rate,
        shuffle_seed=args.shuffle_seed,
    )

    def report(pct: float):
        log.debug(f"Training progress: {pct:.0f}%")

    model = ml_pipeline.train(records, config, progress=report)
    path = ml_pipeline.save_model(model, args.output)

    print(f"Model: {model.name} ({model.id})")
    print(f"Trained on {model.training_size} records")
    if model.accuracy is None:
        print("Accuracy: n/a (test split cannot be scored)")
    else:
        print(f"Accuracy (R²): {model.accuracy:.4f} ({model.accuracy_pct}%)")
    top = sorted(model.feature_importance.items(), key=lambda x: -x[1])[:5]
    for name, imp in top:
        print(f"  {name}: {imp:.3f}")
    print(f"Saved: {path}")
    return 0


def cmd_predict(args) -> int:
    records = data.load_dataset(args.data)
    if args.model:
        model = ml_pipeline.load_model(args.model)
        yields = ml_pipeline.predict(model, records)
        source = model.id
    else:
        log.warning("No model given, using rule-based baseline")
        yields = [float(v) for v in RuleBasedYieldModel().predict(records)]
        source = "baseline"

    rows = [{"row": i, "predicted_yield": round(v, 2)} for i, v in enumerate(yields)]
    if args.output:
        out = Path(args.output).expanduser().resolve()
        out.write_text(json.dumps({"model": source, "predictions": rows}, indent=2), encoding="utf-8")
        print(f"Saved: {out}")
    else:
        for row in rows:
            print(f"{row['row']:>5}  {row['predicted_yield']:>8.2f}")
    return 0


def cmd_evaluate(args) -> int:
    model = ml_pipeline.load_model(args.model)
    records = data.load_dataset(args.data)
    score = ml_pipeline.evaluate(model, records)
    print(f"R² on {len(records)} records: {score:.4f}")
    return 0


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Crop yield model training")
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    g = sub.add_parser("generate", help="Write a synthetic dataset")
    g.add_argument("--count", type=int, default=1000)
    g.add_argument("--seed", type=int, default=MODEL.random_state)
    g.add_argument("--output", required=True, help="CSV path")
    g.set_defaults(func=cmd_generate)

    t = sub.add_parser("train", help="Train a model")
    t.add_argument("--data", required=True, help="Training CSV path")
    t.add_argument("--algorithm", default=MODEL.algorithm,
                   choices=[a.value for a in ml_pipeline.Algorithm])
    t.add_argument("--rounds", type=int, default=MODEL.round_count)
    t.add_argument("--learning-rate", type=float, default=MODEL.learning_rate)
    t.add_argument("--shuffle-seed", type=int, help="Shuffle before the 80/20 split")
    t.add_argument("--output", help="Model path (default: models dir)")
    t.set_defaults(func=cmd_train)

    pr = sub.add_parser("predict", help="Predict yields")
    pr.add_argument("--data", required=True, help="Observations CSV path")
    pr.add_argument("--model", help="Saved model; baseline heuristic if omitted")
    pr.add_argument("--output", help="JSON output path")
    pr.set_defaults(func=cmd_predict)

    e = sub.add_parser("evaluate", help="Score a model")
    e.add_argument("--model", required=True)
    e.add_argument("--data", required=True, help="Labeled CSV path")
    e.set_defaults(func=cmd_evaluate)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    try:
        return args.func(args)
    except (CropYieldError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
