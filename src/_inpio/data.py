"""
Numeric access to the data lines of keyword tokens, ie. for

    *Node
    1, 0.0, 0.0, 0.0
    2, 1.0, 0.0, 0.0

data_array(token) gives a numpy array of shape (2, 4).
"""

import numpy as np

from _inpio.tokenizer.token_kind import TokenKind


class DataFormatError(Exception):
    """
    Raised when the data lines of a keyword cannot be converted to an array.
    """

    pass


def data_rows(token):
    """
    Split the data lines of a keyword token into fields. Blank lines are
    skipped and trailing empty fields (from a trailing comma) are dropped.

    :returns: List of rows, each a list of field strings.
    """
    if token.kind != TokenKind.KEYWORD:
        raise DataFormatError(f"Only keyword tokens have data rows, got {token.kind}")
    rows = []
    for line in token.data_lines():
        fields = [f.strip() for f in line.split(",")]
        while fields and not fields[-1]:
            fields.pop()
        if fields:
            rows.append(fields)
    return rows


def data_array(token, dtype=np.float64, flatten=False):
    """
    Convert the data lines of a keyword token to a numpy array.

    :param token: A token of kind TokenKind.KEYWORD.
    :param dtype: The dtype of the resulting array.
    :param flatten: If True, all fields are returned in a one dimensional
        array regardless of how they are split over lines, as is needed for
        set keywords such as *Nset and *Elset.
    :returns: A two dimensional array with one row per data line, or a one
        dimensional array if flatten is True.
    """
    rows = data_rows(token)
    if flatten:
        values = [field for row in rows for field in row]
    else:
        widths = {len(row) for row in rows}
        if len(widths) > 1:
            raise DataFormatError(
                f"Data lines of *{token.name} have differing number of values:"
                f" {sorted(widths)}, use flatten=True to read them as one array"
            )
        values = rows
    try:
        return np.array(values, dtype=np.dtype(dtype))
    except ValueError as err:
        raise DataFormatError(
            f"Could not convert data of *{token.name} to {np.dtype(dtype)}: {err}"
        ) from err
