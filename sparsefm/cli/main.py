# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for sparsefm.

The global options (--config, --set, --log-level) and the field shortcuts
are inherited by both subcommands through argparse's parent parser
mechanism. Every shortcut maps onto one ``SolverConfig`` field and defaults
to None, so an unset flag never overrides the config file.

Usage:
    sparsefm train --train data/train.txt --test data/test.txt --score fm -k 8
    sparsefm train --config run.yaml --cv --folds 5
    sparsefm predict --inference data/test.txt --model model.pt --output out.txt
"""

import argparse
import sys
from collections.abc import Sequence
from typing import Optional

from sparsefm import __version__
from sparsefm.cli.commands import handle_predict, handle_train
from sparsefm.cli.exit_codes import USER_ERROR

# (flags, config field, type, help)
_SHORTCUTS: tuple[tuple[tuple[str, ...], str, type, str], ...] = (
    (("--train",), "train_set_file", str, "Training data file."),
    (("--test",), "test_set_file", str, "Held-out data evaluated after each epoch."),
    (("--inference",), "inference_file", str, "Data file to predict."),
    (("--model",), "model_checkpoint_file", str, "Model checkpoint to write or read."),
    (("--output",), "output_file", str, "File receiving one prediction per line."),
    (("--folds",), "num_folds", int, "Number of cross validation folds."),
    (("--score",), "score_func", str, "Model family: linear, fm or ffm."),
    (("--loss",), "loss_func", str, "Loss: squared, cross_entropy or hinge."),
    (("--updater",), "updater_type", str, "Updater: sgd, adagrad or momentum."),
    (("--format",), "file_format", str, "Data format: libsvm, libffm or csv."),
    (("-k",), "num_K", int, "Latent dimension for fm / ffm."),
    (("--epochs",), "num_epochs", int, "Number of training epochs."),
    (("--lr",), "learning_rate", float, "Learning rate."),
    (("--lambda",), "regu_lambda", float, "L2 regularization strength."),
    (("--batch-size",), "batch_size", int, "Rows per batch."),
)


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with the options shared by every subcommand.

    ``add_help=False`` keeps its help text from colliding with the
    subcommand parsers'.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--set",
        action="append",
        default=[],
        dest="overrides",
        metavar="KEY=VALUE",
        help="Override any config field. Repeatable.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level.",
    )

    fields = parent.add_argument_group("config shortcuts")
    for flags, dest, kind, help_text in _SHORTCUTS:
        fields.add_argument(*flags, dest=dest, type=kind, default=None, help=help_text)
    fields.add_argument(
        "--cv",
        action="store_const",
        const=True,
        default=None,
        dest="cross_validation",
        help="Run k-fold cross validation on the training file.",
    )
    fields.add_argument(
        "--on-disk",
        action="store_const",
        const=True,
        default=None,
        dest="on_disk",
        help="Stream batches from disk instead of loading the file into memory.",
    )
    return parent


def build_parser() -> argparse.ArgumentParser:
    parent = _build_global_parser()
    root_parser = argparse.ArgumentParser(
        prog="sparsefm",
        description="Linear, FM and FFM training and inference over sparse data.",
    )
    root_parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = root_parser.add_subparsers(dest="command")

    commands = [
        ("train", "Train a model, or cross-validate one.", handle_train),
        ("predict", "Predict with a trained model.", handle_predict),
    ]
    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler)

    return root_parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    If no subcommand is given, help is shown and the exit code is USER_ERROR.
    """
    root_parser = build_parser()
    args = root_parser.parse_args(argv)

    if getattr(args, "func", None) is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
