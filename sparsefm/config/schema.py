# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe run configuration for sparsefm.

A run is described by one frozen pydantic model, ``SolverConfig``. Frozen
means nobody mutates it after validation; the solver derives new copies
instead:

  - ``with_dimensions`` fills ``num_feature`` / ``num_field`` / ``num_param``
    after the training pre-scan. It refuses to run twice.
  - inference reconciles family and dimensions from the loaded model through
    one explicit step in ``sparsefm.solver.core``.

The string tags (``score_func``, ``loss_func``, ``updater_type``,
``file_format``) are not checked here. The component registries own the set
of valid keys, and the solver rejects unknown ones before touching any file.

Like the rest of the config layer, the model uses:
  - frozen=True: immutability after construction
  - extra="forbid": unknown keys fail immediately
  - validate_default=True: defaults get type-checked too
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SolverConfig(BaseModel):
    """Every parameter of a train or inference run."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    # ── Mode and files ──
    mode: Literal["train", "inference"] = Field(
        default="train",
        description="Which pipeline the solver assembles",
    )
    train_set_file: str = Field(default="", description="Training data file")
    test_set_file: str = Field(
        default="",
        description="Optional held-out file evaluated after every epoch",
    )
    inference_file: str = Field(default="", description="Data to predict in inference mode")
    model_checkpoint_file: str = Field(
        default="",
        description="Where training saves the model and inference loads it from",
    )
    output_file: str = Field(
        default="",
        description="Prediction output for inference; one value per line",
    )

    # ── Cross validation ──
    cross_validation: bool = Field(default=False, description="Run k-fold cross validation")
    num_folds: int = Field(
        default=5,
        description="Number of folds; the solver rejects values below 1",
    )

    # ── Component selection ──
    score_func: str = Field(default="linear", description="Model family: linear, fm or ffm")
    loss_func: str = Field(default="squared", description="Loss: squared, cross_entropy, hinge")
    updater_type: str = Field(default="sgd", description="Update rule: sgd, adagrad, momentum")
    file_format: str = Field(default="libsvm", description="Parser: libsvm, libffm or csv")
    on_disk: bool = Field(
        default=False,
        description="Stream batches from disk instead of holding the file in memory",
    )

    # ── Hyperparameters ──
    batch_size: int = Field(default=256, ge=1, description="Rows per batch")
    num_K: int = Field(default=4, ge=1, description="Latent dimension for fm / ffm")
    learning_rate: float = Field(default=0.1, gt=0.0, description="Step size of the updater")
    regu_lambda: float = Field(default=0.0, ge=0.0, description="L2 regularisation strength")
    momentum: float = Field(
        default=0.9,
        ge=0.0,
        lt=1.0,
        description="Velocity decay for the momentum updater",
    )
    num_epochs: int = Field(default=10, ge=1, description="Passes over the training data")
    init_std: float = Field(
        default=0.01,
        gt=0.0,
        description="Standard deviation of the Gaussian init for latent families",
    )
    seed: int = Field(default=42, ge=0, description="Seed for initialisation")

    # ── Observability ──
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Verbosity of every package logger",
    )
    log_file: Optional[str] = Field(default=None, description="Optional JSON log file")

    # ── Derived during initialisation ──
    num_feature: int = Field(default=0, ge=0, description="Largest feature index seen")
    num_field: int = Field(default=0, ge=0, description="Largest field id seen (ffm only)")
    num_param: int = Field(default=0, ge=0, description="Length of the parameter vector")

    @property
    def is_train(self) -> bool:
        return self.mode == "train"

    def with_dimensions(self, num_feature: int, num_field: int, num_param: int) -> "SolverConfig":
        """
        Return a copy with the derived dimensions filled in.

        Raises:
            ValueError: If the dimensions were already derived.
        """
        if self.num_param != 0:
            raise ValueError(
                f"Derived dimensions are write-once; num_param is already {self.num_param}"
            )
        return self.model_copy(
            update={
                "num_feature": num_feature,
                "num_field": num_field,
                "num_param": num_param,
            }
        )
