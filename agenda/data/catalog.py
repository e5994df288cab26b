from __future__ import annotations

from typing import Dict, List

from ..models.items import Format, Proposal, Status


def proposal_from_dict(p: Dict[str, object]) -> Proposal:
    return Proposal(
        id=str(p.get("id")),
        title=str(p.get("title", "")),
        format=Format(p.get("format")),
        status=Status(p.get("status", Status.confirmed.value)),
        speakers=tuple(p.get("speakers", []) or []),
    )


class ProposalCatalog:
    def __init__(self, data: Dict[str, object]):
        self.records: List[Proposal] = []
        for p in data.get("proposals", []):
            self.records.append(proposal_from_dict(p))
        self._by_id: Dict[str, Proposal] = {p.id: p for p in self.records}

    def __len__(self) -> int:
        return len(self.records)

    def get(self, proposal_id: str) -> Proposal | None:
        return self._by_id.get(proposal_id)

    def by_id(self) -> Dict[str, Proposal]:
        return dict(self._by_id)

    def with_status(self, *statuses: Status) -> List[Proposal]:
        wanted = set(statuses)
        return [p for p in self.records if p.status in wanted]
