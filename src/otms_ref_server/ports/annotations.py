from __future__ import annotations

from typing import Dict, Protocol

from otms_ref_server.models import Annotation


class AnnotationStorePort(Protocol):
    """
    Key-value store of annotations, one mapping per tracked account.

    ``get`` returns an empty mapping for unknown accounts; ``put`` replaces the
    whole mapping.
    """

    def get(self, account_id: str) -> Dict[str, Annotation]:
        ...

    def put(self, account_id: str, annotations: Dict[str, Annotation]) -> None:
        ...
