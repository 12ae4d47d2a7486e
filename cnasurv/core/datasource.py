"""
PatientTable: the in-memory patient x marker table consumed by cnasurv.

PatientTable is the "I have patients" abstraction. Loading, joining and
subtype filtering happen upstream; by the time data reaches this class it is
one row per patient with a survival time, an event indicator and any number
of marker columns.

Values are kept raw (object arrays) so that missing and malformed entries
survive until the cohort builder decides what to drop.

Usage:
    from cnasurv import PatientTable

    table = PatientTable.from_dataframe(
        df, id_column='PATIENT_ID', time_column='OS_DAYS', event_column='OS_EVENT',
    )
    table = PatientTable.from_records(rows, id_key='id', time_key='t', event_key='e')
    table = PatientTable.from_arrays(patient_id=ids, time=t, event=e, ERBB2=cn)

    table.markers()          # ('ERBB2', 'MYC', ...)
    table.column('ERBB2')    # raw marker column
    'MYC' in table           # True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from cnasurv.core.exceptions import InvalidMarkerError, ValidationError
from cnasurv.core.validation import check_consistent_length, is_missing

if TYPE_CHECKING:
    import pandas as pd


def _as_column(values: Any) -> NDArray:
    """Copy values into a read-only 1D object array."""
    arr = np.empty(len(values), dtype=object)
    arr[:] = list(values)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True)
class PatientTable:
    """
    Immutable, column-oriented patient table.

    Construct via factory classmethods, not directly.
    """
    patient_id: NDArray
    time: NDArray
    event: NDArray
    _markers: dict[str, NDArray]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Column Access ===

    def markers(self) -> tuple[str, ...]:
        """Marker column names, in insertion order."""
        return tuple(self._markers)

    def column(self, marker: str) -> NDArray:
        """
        Return the raw values of one marker column.

        Raises:
            InvalidMarkerError: If the table has no such marker
        """
        try:
            return self._markers[marker]
        except KeyError:
            available = self.markers()
            raise InvalidMarkerError(
                f"PatientTable has no marker '{marker}'. "
                f"Available: {list(available)}",
                marker=marker,
                available=available,
            ) from None

    def __contains__(self, marker: object) -> bool:
        return marker in self._markers

    def __len__(self) -> int:
        return len(self.patient_id)

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of patients (rows)."""
        return len(self.patient_id)

    @property
    def metadata(self) -> dict[str, Any]:
        """Source description and column names."""
        return self._metadata.copy()

    # === Factory Methods ===

    @classmethod
    def from_arrays(
        cls,
        *,
        patient_id: Iterable[Any],
        time: Iterable[Any],
        event: Iterable[Any],
        **markers: Iterable[Any],
    ) -> PatientTable:
        """Construct from parallel sequences, one keyword per marker."""
        return cls._build(
            patient_id=list(patient_id),
            time=list(time),
            event=list(event),
            markers={name: list(values) for name, values in markers.items()},
            metadata={'source': 'arrays'},
        )

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        *,
        id_key: str = 'patient_id',
        time_key: str = 'time',
        event_key: str = 'event',
        marker_keys: Iterable[str] | None = None,
    ) -> PatientTable:
        """
        Construct from row mappings.

        Marker columns default to every key other than the id, time and
        event keys, in first-seen order. A record missing a marker key gets
        None for that marker.
        """
        rows = list(records)
        reserved = {id_key, time_key, event_key}

        if marker_keys is None:
            names: dict[str, None] = {}
            for row in rows:
                for key in row:
                    if key not in reserved:
                        names.setdefault(key, None)
            marker_names = list(names)
        else:
            marker_names = list(marker_keys)

        for row_idx, row in enumerate(rows):
            for key in (id_key, time_key, event_key):
                if key not in row:
                    raise ValidationError(
                        f"record {row_idx} has no '{key}' field"
                    )

        return cls._build(
            patient_id=[row[id_key] for row in rows],
            time=[row[time_key] for row in rows],
            event=[row[event_key] for row in rows],
            markers={
                name: [row.get(name) for row in rows] for name in marker_names
            },
            metadata={'source': 'records'},
        )

    @classmethod
    def from_dataframe(
        cls,
        df: 'pd.DataFrame',
        *,
        id_column: str | None = None,
        time_column: str = 'time',
        event_column: str = 'event',
        marker_columns: Iterable[str] | None = None,
    ) -> PatientTable:
        """
        Construct from a pandas DataFrame.

        If id_column is None the DataFrame index supplies patient ids.
        Marker columns default to all remaining columns.
        """
        required = [time_column, event_column]
        if id_column is not None:
            required.append(id_column)
        missing = [col for col in required if col not in df.columns]
        if missing:
            raise ValidationError(
                f"DataFrame is missing required columns {missing}. "
                f"Available: {list(df.columns)}"
            )

        if marker_columns is None:
            reserved = set(required)
            marker_names = [col for col in df.columns if col not in reserved]
        else:
            marker_names = list(marker_columns)
            unknown = [col for col in marker_names if col not in df.columns]
            if unknown:
                raise ValidationError(
                    f"marker_columns not in DataFrame: {unknown}"
                )

        ids = df.index if id_column is None else df[id_column]

        return cls._build(
            patient_id=ids.tolist(),
            time=df[time_column].tolist(),
            event=df[event_column].tolist(),
            markers={str(name): df[name].tolist() for name in marker_names},
            metadata={
                'source': 'dataframe',
                'columns': [str(col) for col in df.columns],
            },
        )

    @classmethod
    def _build(
        cls,
        *,
        patient_id: list[Any],
        time: list[Any],
        event: list[Any],
        markers: dict[str, list[Any]],
        metadata: dict[str, Any],
    ) -> PatientTable:
        names = ('patient_id', 'time', 'event') + tuple(markers)
        check_consistent_length(
            patient_id, time, event, *markers.values(), names=names,
        )

        seen: set[Any] = set()
        duplicates = []
        for pid in patient_id:
            try:
                if pid in seen:
                    duplicates.append(pid)
                seen.add(pid)
            except TypeError as e:
                raise ValidationError(
                    f"patient_id values must be hashable, got {type(pid).__name__} {pid!r}"
                ) from e
        if duplicates:
            raise ValidationError(
                f"patient_id must be unique, duplicated: {duplicates[:5]}"
            )

        metadata = dict(metadata)
        metadata['n_observations'] = len(patient_id)
        metadata['markers'] = list(markers)

        return cls(
            patient_id=_as_column(patient_id),
            time=_as_column(time),
            event=_as_column(event),
            _markers={name: _as_column(values) for name, values in markers.items()},
            _metadata=metadata,
        )


def event_from_vital_status(
    values: Iterable[Any],
    dead_label: str = 'Dead',
) -> list[float | None]:
    """
    Map vital status labels to event indicators.

    ``dead_label`` becomes 1.0, any other present label 0.0. Missing values
    (None, NaN, empty strings) stay None so the cohort builder drops them.

    Example:
        >>> event_from_vital_status(['Dead', 'Alive', None])
        [1.0, 0.0, None]
    """
    events: list[float | None] = []
    for value in values:
        if is_missing(value):
            events.append(None)
        else:
            events.append(1.0 if str(value).strip() == dead_label else 0.0)
    return events
