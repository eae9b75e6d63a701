"""Record types persisted by the quote desk and their JSON document shape.

A record starts life as a *request* (intake form or CSV row) and may be
upgraded in place to a *quote* once pricing is attached.  The JSON keys
mirror the stored document so existing collections keep loading.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


class RecordKind(str, Enum):
    REQUEST = "request"
    QUOTE = "quote"


class RecordStatus(str, Enum):
    NEW = "New"
    QUOTED = "Quoted"


class RecordVariant(str, Enum):
    """Which payloads a record carries."""

    REQUEST = "request"
    QUOTE = "quote"
    PROMOTED_QUOTE = "promoted_quote"


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _mapping(value: object, name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{name} is not an object")
    return value


def _number(value: object) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0


@dataclass
class Requester:
    name: str = ""
    email: str = ""
    wa: str = ""


@dataclass
class TrainingParams:
    participants: str = ""
    sessions: str = ""
    mode: str = ""
    location: str = ""
    start_date: str = ""


@dataclass
class RequestDetails:
    region: str = ""
    team: str = ""
    materials: str = ""
    notes: str = ""


@dataclass
class RequestPayload:
    """Client intake data captured before any pricing exists."""

    client_name: str
    order_type: str = ""
    source: str = ""
    request_date: str = ""
    requester: Requester = field(default_factory=Requester)
    training: TrainingParams = field(default_factory=TrainingParams)
    details: RequestDetails = field(default_factory=RequestDetails)

    @classmethod
    def from_form(cls, form: Mapping[str, object]) -> "RequestPayload":
        """Build a payload from flat intake-form values keyed by field name."""

        def get(key: str) -> str:
            return _text(form.get(key)).strip()

        return cls(
            client_name=get("clientName"),
            order_type=get("orderType"),
            source=get("source"),
            request_date=get("date"),
            requester=Requester(name=get("name"), email=get("email"), wa=get("wa")),
            training=TrainingParams(
                participants=get("participants"),
                sessions=get("sessions"),
                mode=get("deliveryMode"),
                location=get("location"),
                start_date=get("startDate"),
            ),
            details=RequestDetails(
                region=get("region"),
                team=get("team"),
                materials=get("materials"),
                notes=get("notes"),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clientName": self.client_name,
            "orderType": self.order_type,
            "source": self.source,
            "requestDate": self.request_date,
            "requester": {
                "name": self.requester.name,
                "email": self.requester.email,
                "wa": self.requester.wa,
            },
            "training": {
                "participants": self.training.participants,
                "sessions": self.training.sessions,
                "mode": self.training.mode,
                "location": self.training.location,
                "startDate": self.training.start_date,
            },
            "details": {
                "region": self.details.region,
                "team": self.details.team,
                "materials": self.details.materials,
                "notes": self.details.notes,
            },
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "RequestPayload":
        requester = _mapping(raw.get("requester"), "requester")
        training = _mapping(raw.get("training"), "training")
        details = _mapping(raw.get("details"), "details")
        return cls(
            client_name=_text(raw.get("clientName")),
            order_type=_text(raw.get("orderType")),
            source=_text(raw.get("source")),
            request_date=_text(raw.get("requestDate")),
            requester=Requester(
                name=_text(requester.get("name")),
                email=_text(requester.get("email")),
                wa=_text(requester.get("wa")),
            ),
            training=TrainingParams(
                participants=_text(training.get("participants")),
                sessions=_text(training.get("sessions")),
                mode=_text(training.get("mode")),
                location=_text(training.get("location")),
                start_date=_text(training.get("startDate")),
            ),
            details=RequestDetails(
                region=_text(details.get("region")),
                team=_text(details.get("team")),
                materials=_text(details.get("materials")),
                notes=_text(details.get("notes")),
            ),
        )


_QUOTE_KEYS = {
    "company_name": "companyName",
    "client_name": "clientName",
    "program_name": "programName",
    "delivery_mode": "deliveryMode",
    "duration_type": "durationType",
    "trainer_name": "trainerName",
    "training_date": "trainingDate",
    "participants": "participants",
    "sessions": "sessions",
}


@dataclass
class QuotePayload:
    """Program and delivery metadata entered alongside the pricing."""

    client_name: str
    company_name: str = ""
    program_name: str = ""
    delivery_mode: str = ""
    duration_type: str = ""
    trainer_name: str = ""
    training_date: str = ""
    participants: str = ""
    sessions: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in _QUOTE_KEYS.items()}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "QuotePayload":
        return cls(**{attr: _text(raw.get(key)) for attr, key in _QUOTE_KEYS.items()})


@dataclass(frozen=True)
class CostLine:
    """One cost category row; quantities are kept as entered for re-editing."""

    component: str
    qty: Union[str, float] = 0
    unit_cost: Union[str, float] = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"component": self.component, "qty": self.qty, "unitCost": self.unit_cost}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "CostLine":
        return cls(
            component=_text(raw.get("component")),
            qty=raw.get("qty", 0),
            unit_cost=raw.get("unitCost", 0),
        )


@dataclass(frozen=True)
class TaxLine:
    label: str
    percent: float
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "percent": self.percent, "amount": self.amount}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TaxLine":
        return cls(
            label=_text(raw.get("label")),
            percent=_number(raw.get("percent")),
            amount=_number(raw.get("amount")),
        )


@dataclass(frozen=True)
class Financials:
    """Point-in-time pricing snapshot stored with a quote."""

    total_cost: float
    margin_percent: float
    selling_price: float
    tax1: TaxLine
    tax2: TaxLine
    final_amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCost": self.total_cost,
            "marginPercent": self.margin_percent,
            "sellingPrice": self.selling_price,
            "tax1": self.tax1.to_dict(),
            "tax2": self.tax2.to_dict(),
            "finalAmount": self.final_amount,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Financials":
        return cls(
            total_cost=_number(raw.get("totalCost")),
            margin_percent=_number(raw.get("marginPercent")),
            selling_price=_number(raw.get("sellingPrice")),
            tax1=TaxLine.from_dict(_mapping(raw.get("tax1"), "tax1")),
            tax2=TaxLine.from_dict(_mapping(raw.get("tax2"), "tax2")),
            final_amount=_number(raw.get("finalAmount")),
        )


@dataclass
class Record:
    id: str
    kind: RecordKind
    status: RecordStatus
    created_at: str
    request: Optional[RequestPayload] = None
    quote: Optional[QuotePayload] = None
    cost_data: List[CostLine] = field(default_factory=list)
    financials: Optional[Financials] = None

    @property
    def variant(self) -> RecordVariant:
        if self.quote is None:
            return RecordVariant.REQUEST
        if self.request is None:
            return RecordVariant.QUOTE
        return RecordVariant.PROMOTED_QUOTE

    @property
    def is_quoted(self) -> bool:
        return self.kind is RecordKind.QUOTE or self.status is RecordStatus.QUOTED

    def display_client_name(self) -> str:
        if self.quote and self.quote.client_name:
            return self.quote.client_name
        if self.request and self.request.client_name:
            return self.request.client_name
        return ""

    def display_program(self) -> str:
        if self.quote and self.quote.program_name:
            return self.quote.program_name
        if self.request and self.request.details.materials:
            return self.request.details.materials
        return ""

    def attach_pricing(
        self,
        quote: QuotePayload,
        cost_data: List[CostLine],
        financials: Financials,
    ) -> None:
        """Upgrade to a quote in place; the request payload is left untouched."""
        self.kind = RecordKind.QUOTE
        self.status = RecordStatus.QUOTED
        self.quote = quote
        self.cost_data = list(cost_data)
        self.financials = financials

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.kind.value,
            "status": self.status.value,
            "timestamp": self.created_at,
        }
        if self.request is not None:
            data["requestData"] = self.request.to_dict()
        if self.quote is not None:
            data["clientName"] = self.quote.client_name
            data["programName"] = self.quote.program_name
            data["quoteData"] = self.quote.to_dict()
        if self.cost_data:
            data["costData"] = [line.to_dict() for line in self.cost_data]
        if self.financials is not None:
            data["financials"] = self.financials.to_dict()
        return data

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Record":
        record_id = raw.get("id")
        if record_id is None or _text(record_id) == "":
            raise ValueError("record has no id")
        request_raw = raw.get("requestData")
        quote_raw = raw.get("quoteData")
        financials_raw = raw.get("financials")
        cost_raw = raw.get("costData") or []
        if not isinstance(cost_raw, list):
            raise ValueError("costData is not a list")
        return cls(
            id=_text(record_id),
            kind=RecordKind(raw.get("type", RecordKind.REQUEST.value)),
            status=RecordStatus(raw.get("status", RecordStatus.NEW.value)),
            created_at=_text(raw.get("timestamp")),
            request=RequestPayload.from_dict(_mapping(request_raw, "requestData")) if request_raw is not None else None,
            quote=QuotePayload.from_dict(_mapping(quote_raw, "quoteData")) if quote_raw is not None else None,
            cost_data=[CostLine.from_dict(_mapping(line, "costData item")) for line in cost_raw],
            financials=Financials.from_dict(_mapping(financials_raw, "financials")) if financials_raw is not None else None,
        )


__all__ = [
    "RecordKind",
    "RecordStatus",
    "RecordVariant",
    "Requester",
    "TrainingParams",
    "RequestDetails",
    "RequestPayload",
    "QuotePayload",
    "CostLine",
    "TaxLine",
    "Financials",
    "Record",
]
