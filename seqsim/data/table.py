"""Hard data table: variable values attached to point coordinates."""

from pathlib import Path

import numpy as np
import pandas as pd


class GeoTable:
    """Georeferenced table of hard data.

    Rows of ``values`` align with rows of ``coords``. Missing entries
    (NaN/None) mean there is no datum for that variable at that row.

    Attributes:
        coords: (M, ndim) float array of data coordinates
        values: DataFrame with one column per variable
    """

    def __init__(self, coords, values):
        """Initialize the table.

        Args:
            coords: Array-like of shape (M, ndim) or (M,)
            values: DataFrame or column mapping with M rows

        Raises:
            ValueError: If coordinates and values have different row counts
        """
        coords = np.array(coords, dtype=float)
        if coords.ndim == 1:
            coords = coords[:, np.newaxis]
        values = pd.DataFrame(values).reset_index(drop=True)

        if coords.ndim != 2 or coords.shape[0] != len(values):
            raise ValueError(
                f"coords shape {coords.shape} does not match {len(values)} data rows"
            )

        coords.setflags(write=False)
        self.coords = coords
        self.values = values

    @classmethod
    def from_csv(cls, path: str | Path, coordinates: list[str]) -> "GeoTable":
        """Load hard data from a CSV file.

        Args:
            path: CSV file path
            coordinates: Names of the coordinate columns; the remaining
                columns are treated as variables

        Raises:
            FileNotFoundError: If the file doesn't exist
            KeyError: If a coordinate column is missing
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Data file not found: {path}")

        df = pd.read_csv(path)
        missing = [c for c in coordinates if c not in df.columns]
        if missing:
            raise KeyError(f"Coordinate columns not found in {path}: {missing}")

        return cls(df[coordinates].to_numpy(dtype=float), df.drop(columns=coordinates))

    def __len__(self) -> int:
        return len(self.values)

    @property
    def ndim(self) -> int:
        return self.coords.shape[1]

    @property
    def variables(self) -> list[str]:
        return list(self.values.columns)

    def has_variable(self, variable: str) -> bool:
        return variable in self.values.columns

    def column(self, variable: str) -> np.ndarray:
        """Values of a variable as a NumPy array.

        Raises:
            KeyError: If the variable is not in the table
        """
        if variable not in self.values.columns:
            available = ", ".join(map(str, self.values.columns))
            raise KeyError(f"Unknown variable '{variable}'. Available: {available}")
        return self.values[variable].to_numpy()
