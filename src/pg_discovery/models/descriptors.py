"""Descriptor models returned by discovery operations.

Catalog queries alias their columns in camelCase (``tableName``, ``keySeq``,
...). The models accept those names as aliases and expose snake_case
attributes; ``model_dump(by_alias=True)`` restores the camelCase shape.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from pg_discovery.types import PortableType


class _Descriptor(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=True,
    )


class TableDescriptor(_Descriptor):
    """A table or view in the catalog."""

    type: Literal["table", "view"] = Field(..., description="Relation kind")
    name: str = Field(..., description="Table or view name")
    owner: Optional[str] = Field(None, description="Owning schema")


class ColumnDescriptor(_Descriptor):
    """A column of a table, with its native and portable type."""

    owner: Optional[str] = Field(None, description="Owning schema")
    table_name: str = Field(..., alias="tableName")
    column_name: str = Field(..., alias="columnName")
    data_type: str = Field(..., alias="dataType", description="Native type name")
    data_length: Optional[int] = Field(
        None, alias="dataLength", description="Character octet length"
    )
    data_precision: Optional[int] = Field(None, alias="dataPrecision")
    data_scale: Optional[int] = Field(None, alias="dataScale")
    nullable: bool = Field(..., description="Whether the column accepts NULL")
    type: PortableType = Field(
        PortableType.STRING, description="Portable type mapped from data_type"
    )


class PrimaryKeyDescriptor(_Descriptor):
    """One column of a primary key constraint."""

    owner: Optional[str] = Field(None, description="Owning schema")
    table_name: str = Field(..., alias="tableName")
    column_name: str = Field(..., alias="columnName")
    key_seq: int = Field(..., alias="keySeq", ge=1, description="1-based position")
    pk_name: str = Field(..., alias="pkName", description="Constraint name")


class ForeignKeyDescriptor(_Descriptor):
    """One column of a foreign key, paired with the column it references."""

    fk_owner: Optional[str] = Field(None, alias="fkOwner")
    fk_name: str = Field(..., alias="fkName")
    fk_table_name: str = Field(..., alias="fkTableName")
    fk_column_name: str = Field(..., alias="fkColumnName")
    key_seq: int = Field(..., alias="keySeq", ge=1, description="1-based position")
    pk_owner: Optional[str] = Field(None, alias="pkOwner")
    pk_name: Optional[str] = Field(None, alias="pkName")
    pk_table_name: str = Field(..., alias="pkTableName")
    pk_column_name: str = Field(..., alias="pkColumnName")
