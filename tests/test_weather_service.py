# ABOUTME: Contract tests for the weather service layer.
# ABOUTME: Validates geocoding and weather calls, payload transformation, formatting and error mapping with mocked HTTP.

from unittest.mock import AsyncMock

import httpx
import pytest

from src.errors import CityNotFound, WeatherFetchFailed
from src.models import LocationCoordinates, WeatherRecord
from src.weather_service import (
    GEOCODING_URL,
    WEATHER_URL,
    WeatherResolver,
    capitalize_description,
    format_weather_display,
    format_weather_summary,
    geocode,
    get_current_weather,
    transform_weather_data,
)
from tests.helpers import TOKYO_GEOCODE, TOKYO_WEATHER, make_response, mock_client

RECORD = WeatherRecord(
    location="Tokyo, JP",
    temperature_f=72,
    feels_like_f=70,
    description="Clear Sky",
    humidity_pct=55,
    wind_speed_mph=5,
)


class TestGeocode:
    @pytest.mark.asyncio
    async def test_resolves_known_city(self):
        """Geocode returns GeoLocations for a known city.

        Implementation: Mocks the direct geocoding API to return Tokyo.
        Passing implies: lat/lon/country fields map onto GeoLocation.
        """
        client = mock_client(TOKYO_GEOCODE)
        result = await geocode(client, "key", "tokyo")

        assert len(result) == 1
        assert result[0].name == "Tokyo"
        assert result[0].latitude == 35.68
        assert result[0].longitude == 139.69
        assert result[0].country == "JP"
        assert result[0].state is None

    @pytest.mark.asyncio
    async def test_sends_query_limit_and_key(self):
        """Geocode sends the raw query, the result limit and the API key.

        Implementation: Inspects the mock client's call args.
        Passing implies: The request matches the OpenWeatherMap geocoding contract.
        """
        client = mock_client([])
        await geocode(client, "secret", "new york", limit=1)

        assert client.get.call_args.args[0] == GEOCODING_URL
        params = client.get.call_args.kwargs["params"]
        assert params == {"q": "new york", "limit": 1, "appid": "secret"}

    @pytest.mark.asyncio
    async def test_empty_list_for_unknown_city(self):
        client = mock_client([])
        assert await geocode(client, "key", "Zzzznotreal") == []


class TestGetCurrentWeather:
    @pytest.mark.asyncio
    async def test_requests_imperial_units(self):
        """Weather requests always ask for imperial units.

        Implementation: Inspects the params sent to the weather endpoint.
        Passing implies: Temperatures come back in Fahrenheit and wind in mph.
        """
        client = mock_client(TOKYO_WEATHER)
        data = await get_current_weather(client, "key", 35.68, 139.69)

        assert data == TOKYO_WEATHER
        assert client.get.call_args.args[0] == WEATHER_URL
        params = client.get.call_args.kwargs["params"]
        assert params == {"lat": 35.68, "lon": 139.69, "appid": "key", "units": "imperial"}


class TestTransformWeatherData:
    def test_tokyo_payload(self):
        """A minimal payload becomes a rounded, title-cased WeatherRecord.

        Implementation: Transforms the Tokyo sample payload.
        Passing implies: Rounding, capitalization and location formatting follow the transform rules.
        """
        assert transform_weather_data(TOKYO_WEATHER) == RECORD.model_copy(update={"pressure_hpa": 1012})

    def test_visibility_converted_to_km(self):
        """Visibility in meters is integer-divided into kilometers.

        Implementation: Transforms payloads with 5000 m, 9999 m and no visibility.
        Passing implies: visibility_km is only present when the source has visibility.
        """
        assert transform_weather_data({**TOKYO_WEATHER, "visibility": 5000}).visibility_km == 5
        assert transform_weather_data({**TOKYO_WEATHER, "visibility": 9999}).visibility_km == 9
        assert transform_weather_data(TOKYO_WEATHER).visibility_km is None

    def test_optional_wind_direction_and_pressure(self):
        payload = {
            **TOKYO_WEATHER,
            "main": {"temp": 50.5, "feels_like": 48.49, "humidity": 90},
            "wind": {"speed": 12.5, "deg": 270},
        }
        record = transform_weather_data(payload)

        assert record.temperature_f == 51
        assert record.feels_like_f == 48
        assert record.wind_speed_mph == 13
        assert record.wind_direction_deg == 270
        assert record.pressure_hpa is None

    def test_capitalize_description(self):
        assert capitalize_description("light rain") == "Light Rain"
        assert capitalize_description("overcast clouds") == "Overcast Clouds"
        assert capitalize_description("mIxed case") == "MIxed Case"


class TestFormatting:
    def test_summary_text(self):
        assert format_weather_summary(RECORD) == (
            "Current weather in Tokyo, JP: 72°F, Clear Sky. Humidity 55%, wind 5 mph."
        )

    def test_display_card(self):
        card = format_weather_display(RECORD)

        assert card.title == "Tokyo, JP"
        assert card.content == "72°F • Clear Sky\nFeels like 70°F\nHumidity: 55%\nWind: 5 mph"


class TestWeatherResolver:
    @pytest.mark.asyncio
    async def test_fetch_by_city_end_to_end(self):
        """fetch_by_city geocodes with limit 1, then fetches weather at the first match.

        Implementation: Mocks geocoding then weather responses in order.
        Passing implies: The two-step chain produces the expected Tokyo record.
        """
        client = mock_client(TOKYO_GEOCODE, TOKYO_WEATHER)
        record = await WeatherResolver(client, "key").fetch_by_city("tokyo")

        assert record == RECORD.model_copy(update={"pressure_hpa": 1012})
        geo_call, weather_call = client.get.call_args_list
        assert geo_call.kwargs["params"]["q"] == "tokyo"
        assert geo_call.kwargs["params"]["limit"] == 1
        assert weather_call.kwargs["params"]["lat"] == 35.68
        assert weather_call.kwargs["params"]["lon"] == 139.69

    @pytest.mark.asyncio
    async def test_city_not_found_is_not_wrapped(self):
        """An empty geocoding result raises CityNotFound, not WeatherFetchFailed.

        Implementation: Mocks geocoding to return an empty list.
        Passing implies: Missing cities are reported distinctly and no weather call is made.
        """
        client = mock_client([])
        with pytest.raises(CityNotFound) as exc:
            await WeatherResolver(client, "key").fetch_by_city("Zzzznotreal")

        assert not isinstance(exc.value, WeatherFetchFailed)
        assert exc.value.city == "Zzzznotreal"
        assert client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_geocoding_http_error_wrapped(self):
        """A non-2xx geocoding response raises WeatherFetchFailed chained from the HTTP error.

        Implementation: Mocks a 401 response from the geocoding endpoint.
        Passing implies: HTTP failures are wrapped with their cause preserved.
        """
        client = mock_client({"cod": 401, "message": "Invalid API key"}, status_code=401)
        with pytest.raises(WeatherFetchFailed) as exc:
            await WeatherResolver(client, "bad").fetch_by_city("tokyo")

        assert isinstance(exc.value.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_weather_transport_error_wrapped(self):
        """A transport error on the weather call raises WeatherFetchFailed.

        Implementation: Geocoding succeeds, then the weather call raises ConnectError.
        Passing implies: Failures at the second step are wrapped too.
        """
        client = AsyncMock(spec=httpx.AsyncClient)
        client.get.side_effect = [make_response(TOKYO_GEOCODE), httpx.ConnectError("boom")]

        with pytest.raises(WeatherFetchFailed) as exc:
            await WeatherResolver(client, "key").fetch_by_city("tokyo")
        assert isinstance(exc.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_fetch_by_coordinates(self):
        client = mock_client(TOKYO_WEATHER)
        record = await WeatherResolver(client, "key").fetch_by_coordinates(
            LocationCoordinates(latitude=35.68, longitude=139.69, accuracy=20.0)
        )

        assert record.location == "Tokyo, JP"
        assert client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_malformed_payload_wrapped(self):
        """A payload missing required blocks raises WeatherFetchFailed.

        Implementation: Mocks a weather response without "main".
        Passing implies: Parse failures never escape as raw KeyErrors.
        """
        client = mock_client({"name": "Tokyo"})
        with pytest.raises(WeatherFetchFailed):
            await WeatherResolver(client, "key").fetch_by_coordinates(LocationCoordinates(latitude=0, longitude=0))
