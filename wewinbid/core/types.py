from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from wewinbid.core.helpers import to_naive_utc

# Datetimes are stored as naive UTC; aware input is converted on the way in.
UTCDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]
