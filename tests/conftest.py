"""Shared test fixtures for token export tests."""
import pytest

from tokens.models import AliasReference, ModeDescriptor, VariableCollection, VariableRecord
from tokens.source import InMemoryVariableSource


LIGHT = ModeDescriptor(mode_id='1:0', name='Light')
DARK = ModeDescriptor(mode_id='1:1', name='Dark')
DEFAULT = ModeDescriptor(mode_id='2:0', name='Mode 1')

RED = {'r': 1, 'g': 0, 'b': 0, 'a': 1}
BLUE = {'r': 0, 'g': 0, 'b': 1, 'a': 1}
WHITE = {'r': 1, 'g': 1, 'b': 1, 'a': 1}
BLACK = {'r': 0, 'g': 0, 'b': 0, 'a': 1}


@pytest.fixture
def single_mode():
    """Mode list of a collection with one mode."""
    return [DEFAULT]


@pytest.fixture
def light_dark_modes():
    """Mode list of a Light/Dark collection."""
    return [LIGHT, DARK]


@pytest.fixture
def themed_source():
    """Source with a Light/Dark collection, a single-mode primitives
    collection, an alias and a non-color variable."""
    primitives = VariableCollection(
        id='VariableCollectionId:2:0',
        name='Primitives',
        modes=[DEFAULT],
        variable_ids=['VariableID:2:1', 'VariableID:2:2', 'VariableID:2:3'],
        default_mode_id='2:0',
    )
    theme = VariableCollection(
        id='VariableCollectionId:1:0',
        name='Theme',
        modes=[LIGHT, DARK],
        variable_ids=['VariableID:1:1', 'VariableID:1:2'],
        default_mode_id='1:0',
    )
    variables = [
        VariableRecord(
            id='VariableID:2:1', name='palette/red', values_by_mode={'2:0': RED},
            collection_id=primitives.id,
        ),
        VariableRecord(
            id='VariableID:2:2', name='palette/blue', values_by_mode={'2:0': BLUE},
            collection_id=primitives.id,
        ),
        VariableRecord(
            id='VariableID:2:3', name='spacing/sm', values_by_mode={'2:0': 4},
            resolved_type='FLOAT', collection_id=primitives.id,
        ),
        VariableRecord(
            id='VariableID:1:1', name='color/background',
            values_by_mode={'1:0': WHITE, '1:1': BLACK},
            collection_id=theme.id,
        ),
        VariableRecord(
            id='VariableID:1:2', name='color/accent',
            values_by_mode={'1:0': AliasReference('VariableID:2:1'), '1:1': BLUE},
            collection_id=theme.id,
        ),
    ]
    return InMemoryVariableSource([primitives, theme], variables)


@pytest.fixture
def variables_payload():
    """Body of GET /v1/files/:key/variables/local."""
    return {
        'status': 200,
        'error': False,
        'meta': {
            'variableCollections': {
                'VariableCollectionId:1:0': {
                    'id': 'VariableCollectionId:1:0',
                    'name': 'Theme',
                    'key': 'abc',
                    'modes': [{'modeId': '1:0', 'name': 'Light'}, {'modeId': '1:1', 'name': 'Dark'}],
                    'defaultModeId': '1:0',
                    'remote': False,
                    'hiddenFromPublishing': False,
                    'variableIds': ['VariableID:1:1', 'VariableID:1:2'],
                },
                'VariableCollectionId:9:0': {
                    'id': 'VariableCollectionId:9:0',
                    'name': 'Library',
                    'key': 'lib',
                    'modes': [{'modeId': '9:0', 'name': 'Mode 1'}],
                    'defaultModeId': '9:0',
                    'remote': True,
                    'hiddenFromPublishing': False,
                    'variableIds': ['VariableID:9:1'],
                },
            },
            'variables': {
                'VariableID:1:1': {
                    'id': 'VariableID:1:1',
                    'name': 'Color/Brand Primary',
                    'key': 'k1',
                    'variableCollectionId': 'VariableCollectionId:1:0',
                    'resolvedType': 'COLOR',
                    'valuesByMode': {
                        '1:0': {'r': 1, 'g': 0, 'b': 0, 'a': 1},
                        '1:1': {'r': 0, 'g': 0, 'b': 1, 'a': 0.5},
                    },
                    'remote': False,
                },
                'VariableID:1:2': {
                    'id': 'VariableID:1:2',
                    'name': 'Color/Link',
                    'key': 'k2',
                    'variableCollectionId': 'VariableCollectionId:1:0',
                    'resolvedType': 'COLOR',
                    'valuesByMode': {
                        '1:0': {'type': 'VARIABLE_ALIAS', 'id': 'VariableID:1:1'},
                        '1:1': {'type': 'VARIABLE_ALIAS', 'id': 'VariableID:1:1'},
                    },
                    'remote': False,
                },
                'VariableID:9:1': {
                    'id': 'VariableID:9:1',
                    'name': 'lib/gray',
                    'key': 'k9',
                    'variableCollectionId': 'VariableCollectionId:9:0',
                    'resolvedType': 'COLOR',
                    'valuesByMode': {'9:0': {'r': 0.5, 'g': 0.5, 'b': 0.5, 'a': 1}},
                    'remote': True,
                },
            },
        },
    }
