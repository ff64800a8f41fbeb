"""CLI entry point.

Run with:
    python -m gibbslda train --corpus-file corpus.txt --model-file model.txt
    python -m gibbslda evaluate --model-file model.txt --corpus-file heldout.txt
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from gibbslda.config import TrainingConfig
from gibbslda.errors import LoadError
from gibbslda.runner import evaluate, train

logger = logging.getLogger("gibbslda")


def _optional_path(value: str) -> Path | None:
    return Path(value) if value else None


def build_parser() -> argparse.ArgumentParser:
    defaults = TrainingConfig()
    parser = argparse.ArgumentParser(
        prog="gibbslda",
        description="Train and evaluate LDA topic models by collapsed Gibbs sampling.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # ── train ─────────────────────────────────────────────────────────
    p_train = sub.add_parser("train", help="Train a model and save the accumulated counts")
    p_train.add_argument("--num-topics", type=int, default=defaults.num_topics,
                         help="The number of topics expected in trained model")
    p_train.add_argument("--topic-prior", type=float, default=defaults.topic_prior,
                         help="The parameter of symmetric Dirichlet on topics")
    p_train.add_argument("--word-prior", type=float, default=defaults.word_prior,
                         help="The parameter of symmetric Dirichlet on words")
    p_train.add_argument("--corpus-file", type=_optional_path, default=None,
                         help="The (input) training data file")
    p_train.add_argument("--model-file", type=_optional_path, default=None,
                         help="The (output) model file")
    p_train.add_argument("--burn-in-iterations", type=int,
                         default=defaults.burn_in_iterations,
                         help="The number of Gibbs sampling iterations for burning in the MCMC")
    p_train.add_argument("--accumulate-iterations", type=int,
                         default=defaults.accumulate_iterations,
                         help="The number of Gibbs sampling iterations for accumulating "
                              "the sampling results")
    p_train.add_argument("--compute-loglikelihood", action=argparse.BooleanOptionalAction,
                         default=defaults.compute_loglikelihood,
                         help="Compute and output the likelihood before each iteration")
    p_train.add_argument("--random-state", type=int, default=None,
                         help="Seed for reproducible sampling")
    p_train.add_argument("--output-dir", type=_optional_path, default=None,
                         help="Directory for topic terms, training trace and plot")
    p_train.add_argument("--normalize", action="store_true",
                         help="Lowercase and strip accents from corpus lines")

    # ── evaluate ──────────────────────────────────────────────────────
    p_eval = sub.add_parser("evaluate", help="Log-likelihood of a corpus under a saved model")
    p_eval.add_argument("--model-file", type=Path, required=True)
    p_eval.add_argument("--corpus-file", type=Path, required=True)
    p_eval.add_argument("--topic-prior", type=float, default=defaults.topic_prior)
    p_eval.add_argument("--word-prior", type=float, default=defaults.word_prior)
    p_eval.add_argument("--iterations", type=int, default=10,
                        help="Inference sweeps before the final log-likelihood")
    p_eval.add_argument("--random-state", type=int, default=None)
    p_eval.add_argument("--normalize", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "train":
        config = TrainingConfig(
            num_topics=args.num_topics,
            topic_prior=args.topic_prior,
            word_prior=args.word_prior,
            corpus_file=args.corpus_file,
            model_file=args.model_file,
            burn_in_iterations=args.burn_in_iterations,
            accumulate_iterations=args.accumulate_iterations,
            compute_loglikelihood=args.compute_loglikelihood,
            random_state=args.random_state,
            output_dir=args.output_dir,
            normalize=args.normalize,
        )
        problems = config.validate()
        if problems:
            for problem in problems:
                logger.error(problem)
            logger.error("Stop training due to invalid flag setting.")
            return 2
        try:
            train(config)
        except LoadError as exc:
            logger.error(f"Error in loading: {exc}")
            return 1
        return 0

    try:
        log_likelihoods = evaluate(
            args.model_file,
            args.corpus_file,
            topic_prior=args.topic_prior,
            word_prior=args.word_prior,
            iterations=args.iterations,
            random_state=args.random_state,
            normalize=args.normalize,
        )
    except (LoadError, ValueError) as exc:
        logger.error(f"Cannot evaluate: {exc}")
        return 1
    logger.info(f"Final log-likelihood: {log_likelihoods[-1]:f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
