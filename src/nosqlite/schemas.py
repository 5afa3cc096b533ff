from typing import Optional

from pydantic import BaseModel


class StoreRow(BaseModel):
    """
    One row of a store table, as streamed by Store.rows().
    """
    key: str
    value: Optional[str] = None
