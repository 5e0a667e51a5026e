import pytest


def make_segment(
    dep_code,
    dep_at,
    arr_code,
    arr_at,
    carrier="LY",
    number="2371",
    aircraft="738",
    duration="PT4H30M",
):
    return {
        "departure": {"iataCode": dep_code, "terminal": "3", "at": dep_at},
        "arrival": {"iataCode": arr_code, "at": arr_at},
        "carrierCode": carrier,
        "number": number,
        "aircraft": {"code": aircraft},
        "operating": {"carrierCode": carrier},
        "duration": duration,
        "id": "1",
        "numberOfStops": 0,
    }


def make_offer(offer_id, outbound, inbound=None, validating="LY", total="412.35"):
    itineraries = [{"duration": "PT4H30M", "segments": outbound}]
    if inbound is not None:
        itineraries.append({"duration": "PT5H10M", "segments": inbound})
    return {
        "type": "flight-offer",
        "id": offer_id,
        "source": "GDS",
        "lastTicketingDate": "2025-05-20",
        "numberOfBookableSeats": 7,
        "itineraries": itineraries,
        "price": {
            "currency": "EUR",
            "total": total,
            "base": "310.00",
            "grandTotal": total,
        },
        "validatingAirlineCodes": [validating],
    }


DICTIONARIES = {
    "locations": {
        "TLV": {"cityCode": "TLV", "countryCode": "IL"},
        "BER": {"cityCode": "BER", "countryCode": "DE"},
        "ATH": {"cityCode": "ATH", "countryCode": "GR"},
    },
    "aircraft": {"738": "BOEING 737-800", "320": "AIRBUS A320"},
    "currencies": {"EUR": "EURO"},
    "carriers": {"LY": "EL AL ISRAEL AIRLINES", "A3": "AEGEAN AIRLINES"},
}


@pytest.fixture
def search_payload():
    return {
        "meta": {"count": 2},
        "data": [
            make_offer(
                "1",
                [make_segment("TLV", "2025-05-28T18:45:00", "BER", "2025-05-28T22:15:00")],
                [
                    make_segment(
                        "BER", "2025-06-03T23:30:00", "ATH", "2025-06-04T03:30:00",
                        carrier="A3", number="601", aircraft="320",
                    ),
                    make_segment(
                        "ATH", "2025-06-04T05:00:00", "TLV", "2025-06-04T07:50:00",
                        carrier="A3", number="928", aircraft="320", duration="PT2H50M",
                    ),
                ],
                validating="A3",
            ),
            make_offer(
                "2",
                [make_segment("TLV", "2025-05-28T15:30:00", "BER", "2025-05-28T19:00:00")],
                [make_segment("BER", "2025-06-04T04:00:00", "TLV", "2025-06-04T09:15:00")],
                total="298.10",
            ),
        ],
        "dictionaries": DICTIONARIES,
    }
