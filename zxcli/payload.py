from pathlib import Path
from typing import Optional

from zxcli.errors import InputError


def resolve_payload(data: Optional[str], data_file: Optional[str]) -> str:
    """
    Return the text to encode from exactly one of an inline string or a file.

    Raises InputError when neither or both sources are given, or when the
    file is missing, cannot be opened, or is not UTF-8 text.
    """
    if data is None and data_file is None:
        raise InputError("must provide either data string or data file")
    if data is not None and data_file is not None:
        raise InputError("provide only one of data string or data file")

    if data is not None:
        return data

    path = Path(data_file)
    if not path.exists():
        raise InputError(f"{data_file} does not exist")
    try:
        with path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except UnicodeDecodeError as e:
        raise InputError(f"{data_file} is not valid UTF-8 text: {e}") from e
    except OSError as e:
        raise InputError(f"{data_file} cannot be opened: {e}") from e
