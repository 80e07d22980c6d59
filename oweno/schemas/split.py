from decimal import Decimal
from typing import Dict, List, Optional, Union

from pydantic import BaseModel

from oweno.models.expense import SplitType


class AllocateRequest(BaseModel):
    total_amount: Decimal
    split_type: SplitType
    participant_ids: List[str]
    inputs: Optional[Dict[str, Union[str, Decimal]]] = None
