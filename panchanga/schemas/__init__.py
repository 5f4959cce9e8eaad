from .panchanga import (
    DailyPanchanga,
    Location,
    TithiVM,
    NakshatraVM,
    YogaVM,
    KaranaVM,
    MaasVM,
    SankrantiVM,
)
from .recurrence import (
    AdhikaPolicy,
    DateWindow,
    Event,
    Occurrence,
    RecurrenceRule,
    RecurrenceType,
)
