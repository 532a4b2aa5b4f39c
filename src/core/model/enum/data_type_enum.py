from enum import StrEnum


class DataType(StrEnum):
    """7M.24 register data types with their fixed word counts."""

    T1 = "t1"
    T2 = "t2"
    T3 = "t3"
    T5 = "t5"
    T6 = "t6"
    T7 = "t7"
    T16 = "t16"
    T17 = "t17"
    FLOAT = "float"

    @property
    def word_count(self) -> int:
        return 1 if self in (DataType.T1, DataType.T2, DataType.T16, DataType.T17) else 2

    @classmethod
    def from_string(cls, s: str) -> "DataType | None":
        if isinstance(s, cls):
            return s
        key: str = s.lower().replace("-", "_").strip()
        aliase_dict = {
            "u16": "t1",
            "uint16": "t1",
            "i16": "t2",
            "int16": "t2",
            "i32": "t3",
            "int32": "t3",
            "pf": "t7",
            "power_factor": "t7",
            "f32": "float",
            "float32": "float",
            "ieee754": "float",
        }
        key: str = aliase_dict.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None
