"""
Tests for DataSource and Record.
"""

import numpy as np
import pandas as pd
import pytest

from pyslopes.core.capabilities import (
    ALL_CAPABILITIES,
    CAPABILITY_LABELLED,
    CAPABILITY_MATERIALIZED,
    CAPABILITY_REPEATABLE,
)
from pyslopes.core.datasource import DataSource, Record
from pyslopes.core.exceptions import DimensionError, ValidationError


class TestRecord:

    def test_value_lookup(self):
        record = Record(features={'crim': 0.5, 'zn': 18.0}, target=24.0, label='Nahant')
        assert record.value('zn') == 18.0
        assert record.target == 24.0

    def test_features_are_read_only(self):
        record = Record(features={'crim': 0.5}, target=1.0)
        with pytest.raises(TypeError):
            record.features['crim'] = 2.0

    def test_caller_dict_not_shared(self):
        values = {'crim': 0.5}
        record = Record(features=values, target=1.0)
        values['crim'] = 9.0
        assert record.value('crim') == 0.5

    def test_unknown_feature_message(self):
        record = Record(features={'crim': 0.5}, target=1.0, label='Swampscott')
        with pytest.raises(KeyError, match="Swampscott.*'nox'"):
            record.value('nox')


class TestFromArrays:

    def test_columns_named(self):
        ds = DataSource.from_arrays(X=np.ones((4, 2)), y=np.zeros(4), columns=['a', 'b'])
        assert ds.keys() == frozenset({'a', 'b', 'y'})
        assert ds.n_observations == 4
        assert ds.metadata['features'] == ['a', 'b']
        assert ds.metadata['target'] == 'y'

    def test_default_column_names(self):
        ds = DataSource.from_arrays(X=np.ones((3, 2)), y=np.zeros(3))
        assert ds.metadata['features'] == ['x0', 'x1']

    def test_column_count_mismatch(self):
        with pytest.raises(DimensionError, match="3 columns but 2 names"):
            DataSource.from_arrays(X=np.ones((4, 3)), columns=['a', 'b'])

    def test_column_named_y_rejected_with_target(self):
        with pytest.raises(ValidationError, match="collides with the target"):
            DataSource.from_arrays(X=np.ones((3, 2)), y=[1.0, 2.0, 3.0], columns=['y', 'b'])

    def test_column_named_y_allowed_without_target(self):
        ds = DataSource.from_arrays(X=np.ones((3, 2)), columns=['y', 'b'])
        assert ds.keys() == frozenset({'y', 'b'})

    def test_duplicate_column_names_rejected(self):
        with pytest.raises(ValidationError, match="duplicate names"):
            DataSource.from_arrays(X=np.ones((3, 2)), columns=['a', 'a'])

    def test_named_array_collides_with_column(self):
        with pytest.raises(ValidationError, match="'a' collides"):
            DataSource.from_arrays(X=np.ones((3, 2)), columns=['a', 'b'], a=[1.0, 2.0, 3.0])

    def test_named_arrays(self):
        ds = DataSource.from_arrays(u=[1, 2, 3], v=[4, 5, 6])
        np.testing.assert_array_equal(ds['v'], [4.0, 5.0, 6.0])
        assert ds.n_observations == 3

    def test_columns_read_only(self):
        ds = DataSource.from_arrays(u=[1.0, 2.0])
        with pytest.raises(ValueError):
            ds['u'][0] = 5.0

    def test_caller_array_stays_writeable(self):
        y = np.array([1.0, 2.0, 3.0])
        DataSource.from_arrays(y=y)
        y[0] = 10.0
        assert y[0] == 10.0

    def test_missing_key_message(self):
        ds = DataSource.from_arrays(u=[1.0])
        with pytest.raises(KeyError, match="no array 'w'"):
            ds['w']

    def test_capabilities(self):
        ds = DataSource.from_arrays(u=[1.0])
        assert ds.supports(CAPABILITY_MATERIALIZED)
        assert ds.supports(CAPABILITY_REPEATABLE)
        assert not ds.supports(CAPABILITY_LABELLED)
        assert not ds.supports('no_such_capability')

    def test_labelled_source_supports_everything(self):
        ds = DataSource.from_arrays(u=[1.0, 2.0], labels=["a", "b"])
        assert all(ds.supports(c) for c in ALL_CAPABILITIES)

    def test_label_length_mismatch(self):
        with pytest.raises(DimensionError, match="labels=1"):
            DataSource.from_arrays(u=[1.0, 2.0], labels=['a'])


class TestFromDataframe:

    def test_label_and_target(self):
        df = pd.DataFrame({
            'town': ['A', 'B'],
            'crim': [0.1, 0.2],
            'mv': [24.0, 21.6],
        })
        ds = DataSource.from_dataframe(df, label='town', target='mv')
        assert ds.labels == ('A', 'B')
        assert ds.supports(CAPABILITY_LABELLED)
        assert 'town' not in ds
        assert ds.metadata['features'] == ['crim']
        assert ds.metadata['target'] == 'mv'

    def test_unknown_target(self):
        df = pd.DataFrame({'crim': [0.1]})
        with pytest.raises(ValidationError, match="target 'mv'"):
            DataSource.from_dataframe(df, target='mv')


class TestRecordsRoundTrip:

    def test_from_records(self):
        records = [
            Record(features={'crim': 1.0, 'zn': 2.0}, target=3.0, label='A'),
            Record(features={'crim': 4.0, 'zn': 5.0}, target=6.0, label='B'),
        ]
        ds = DataSource.from_records(records, target='mv')
        np.testing.assert_array_equal(ds['crim'], [1.0, 4.0])
        np.testing.assert_array_equal(ds['mv'], [3.0, 6.0])
        assert ds.labels == ('A', 'B')
        assert ds.metadata['features'] == ['crim', 'zn']

    def test_records_back(self):
        records = [
            Record(features={'crim': 1.0, 'zn': 2.0}, target=3.0, label='A'),
            Record(features={'crim': 4.0, 'zn': 5.0}, target=6.0, label='B'),
        ]
        ds = DataSource.from_records(records, target='mv')
        assert list(ds.records()) == records

    def test_empty_records(self):
        with pytest.raises(ValidationError, match="at least one record"):
            DataSource.from_records([])

    def test_feature_mismatch(self):
        records = [
            Record(features={'crim': 1.0, 'zn': 2.0}, target=3.0),
            Record(features={'crim': 4.0}, target=6.0, label='short'),
        ]
        with pytest.raises(ValidationError, match=r"records\[1\].*missing=\['zn'\]"):
            DataSource.from_records(records)

    def test_target_collides_with_feature(self):
        records = [Record(features={'y': 1.0}, target=3.0)]
        with pytest.raises(ValidationError, match="collides"):
            DataSource.from_records(records, target='y')

    def test_records_need_target(self):
        ds = DataSource.from_arrays(u=[1.0])
        with pytest.raises(ValidationError, match="no target"):
            list(ds.records())
