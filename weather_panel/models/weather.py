from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """Resolved location of a weather query"""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    name: str = Field(..., description="Location name")
    region: str = Field("", description="Region or state")
    country: str = Field("", description="Country")
    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in degrees")
    tz_id: str | None = Field(None, description="IANA timezone of the location")
    localtime_epoch: int = Field(..., description="Local time as Unix epoch seconds")
    localtime: str = Field(..., description="Local civil time, e.g. '2024-10-02 14:05'")


class Condition(BaseModel):
    """Textual weather condition with its icon"""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    text: str
    icon: str
    code: int | None = None


class CurrentConditions(BaseModel):
    """Observed conditions at a location"""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    last_updated_epoch: int
    last_updated: str
    temp_c: float
    temp_f: float
    is_day: int | None = None
    condition: Condition
    wind_mph: float
    wind_kph: float
    wind_degree: int = Field(..., ge=0, le=360)
    wind_dir: str
    pressure_mb: float
    pressure_in: float
    precip_mm: float
    precip_in: float
    humidity: int = Field(..., ge=0, le=100)
    cloud: int = Field(..., ge=0, le=100)
    feelslike_c: float
    feelslike_f: float
    vis_km: float
    vis_miles: float
    uv: float = Field(..., ge=0)
    gust_mph: float
    gust_kph: float


class WeatherReport(BaseModel):
    """Decoded current.json response"""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    location: Location
    current: CurrentConditions


class UpstreamErrorDetail(BaseModel):
    code: int | None = None
    message: str


class UpstreamErrorBody(BaseModel):
    """Error envelope returned by the weather API"""

    error: UpstreamErrorDetail


class WeatherQuery(BaseModel):
    """Free-text location query"""

    model_config = ConfigDict(str_strip_whitespace=True)

    q: str = Field(..., min_length=1, description="City name, coordinates or landmark")
