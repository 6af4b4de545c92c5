"""Exceptions raised by the workbook generator.

Severity follows where an error is caught:

* :class:`TemplateNotFoundError` is fatal to the whole run.
* :class:`SourceFileNotFoundError`, :class:`TargetSheetExistsError` and
  :class:`TargetSheetNotFoundError` abandon one input file; the generator
  logs them and moves on.
* Anything raised while converting a single row is folded into the
  importer's :class:`~csv_to_workbook.importers.base.ImportResult`.
"""


class WorkbookGeneratorError(Exception):
    """Base class for all generator errors."""


class InvalidCellAddressError(WorkbookGeneratorError, ValueError):
    """A column/row index below one, or a malformed cell reference."""


class DuplicateSheetNameError(WorkbookGeneratorError):
    """A sheet name is already taken in the target workbook."""

    def __init__(self, sheet_name):
        self.sheet_name = sheet_name
        super().__init__(f"A sheet named '{sheet_name}' already exists in the target workbook.")


class TargetSheetExistsError(DuplicateSheetNameError):
    """The sheet a detail import would create already exists."""

    def __init__(self, sheet_name):
        super().__init__(sheet_name)
        self.args = (
            f"A sheet with the name '{sheet_name}' already exists in the template workbook, "
            "this is not supported for streamed import.",
        )


class TargetSheetNotFoundError(WorkbookGeneratorError):
    """The pre-existing sheet an import writes into is missing."""

    def __init__(self, sheet_name):
        self.sheet_name = sheet_name
        super().__init__(f"Could not locate the worksheet '{sheet_name}' in the target workbook.")


class SourceFileNotFoundError(WorkbookGeneratorError, FileNotFoundError):
    """A source CSV file does not exist."""


class TemplateNotFoundError(WorkbookGeneratorError):
    """The workbook template could not be located or read."""


class WriterStateError(WorkbookGeneratorError):
    """An out-of-order call on the streaming sheet writer."""


class MissingArgumentError(WorkbookGeneratorError):
    """A required setting was not supplied."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Required argument '{name}' was not supplied.")
