"""Tests for the pipeline error types."""

import pytest

from common.Errors import (
  CleanupFailed,
  ConfigMissing,
  ExportFailed,
  ImportFailed,
  PipelineError,
  RewriteFailed,
  TransferFailed,
)
from common.Hosts import TransferDirection


class TestPipelineError:
  """Tests for error messages and attributes."""

  def test_aborts_like_system_exit(self):
    with pytest.raises(SystemExit):
      raise ExportFailed("wp exited 1", TransferDirection.PUSH)

  def test_message_names_step_and_direction(self):
    error = TransferFailed("connection reset", TransferDirection.PULL)

    assert str(error) == "######### transfer step failed during pull: connection reset"
    assert error.step == "transfer"
    assert error.direction is TransferDirection.PULL
    assert error.reason == "connection reset"

  def test_without_direction(self):
    assert str(ConfigMissing("no config")) == "######### config step failed: no config"

  def test_step_override(self):
    assert PipelineError("boom", step="custom").step == "custom"

  @pytest.mark.parametrize(
    "error_class,step",
    [(ImportFailed, "import"), (RewriteFailed, "rewrite"), (CleanupFailed, "cleanup")],
  )
  def test_steps(self, error_class, step):
    assert error_class("x").step == step
