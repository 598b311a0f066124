# Errors raised by the database transfer tasks.
# They subclass SystemExit, so an uncaught one aborts the fab run with its
# message, the same as the rest of our deployment scripts.


class PipelineError(SystemExit):
  step = None

  def __init__(self, message, direction=None, step=None):
    if step is not None:
      self.step = step
    self.direction = direction
    self.reason = message
    if direction is None:
      text = "######### %s step failed: %s" % (self.step, message)
    else:
      text = "######### %s step failed during %s: %s" % (self.step, direction, message)
    super().__init__(text)

  def __str__(self):
    return self.code


class ConfigMissing(PipelineError):
  step = "config"


class ConfigInvalid(PipelineError):
  step = "config"


class DirectoryCreateFailed(PipelineError):
  step = "mkdir"


class ExportFailed(PipelineError):
  step = "export"


class TransferFailed(PipelineError):
  step = "transfer"


class ImportFailed(PipelineError):
  step = "import"


class RewriteFailed(PipelineError):
  step = "rewrite"


# Never propagated out of a pipeline run, only reported as a warning
class CleanupFailed(PipelineError):
  step = "cleanup"
