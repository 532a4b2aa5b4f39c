from core.model.enum.data_type_enum import DataType
from core.model.register_map import COUNTERS, MEASUREMENT_FIELDS, RUNTIME


def test_measurement_field_addresses():
    table = [(RUNTIME.address, RUNTIME.count, RUNTIME.data_type)] + [
        (f.address, f.count, f.data_type) for f in MEASUREMENT_FIELDS
    ]
    assert table == [
        (103, 2, DataType.T3),
        (105, 2, DataType.T5),
        (107, 2, DataType.T5),
        (126, 2, DataType.T5),
        (140, 2, DataType.T6),
        (148, 2, DataType.T6),
        (156, 2, DataType.T5),
        (164, 2, DataType.T7),
        (181, 1, DataType.T17),
        (182, 1, DataType.T17),
        (188, 1, DataType.T17),
    ]


def test_counter_addresses():
    assert [(c.name, c.exp_address, c.mantissa_address, c.x10_address, c.float_address) for c in COUNTERS] == [
        ("c1", 401, 406, 462, 2638),
        ("c4", 404, 412, 468, 2644),
        ("x3", 448, 418, 474, 2764),
    ]


def test_data_type_word_counts():
    assert {t: t.word_count for t in DataType} == {
        DataType.T1: 1,
        DataType.T2: 1,
        DataType.T3: 2,
        DataType.T5: 2,
        DataType.T6: 2,
        DataType.T7: 2,
        DataType.T16: 1,
        DataType.T17: 1,
        DataType.FLOAT: 2,
    }


def test_data_type_from_string():
    assert DataType.from_string("T5") == DataType.T5
    assert DataType.from_string("uint16") == DataType.T1
    assert DataType.from_string("ieee754") == DataType.FLOAT
    assert DataType.from_string("t4") is None
