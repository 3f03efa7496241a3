import requests
from typing import Optional


class WorkoutLogClient:
    """Simple REST client for the workout log API."""

    def __init__(self, base_url: str = "http://localhost:8000", session=None) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def health(self) -> dict:
        resp = self.session.get(f"{self.base_url}/health")
        resp.raise_for_status()
        return resp.json()

    def add_entry(
        self,
        date: str,
        type: str,
        minutes: int | str = 0,
        value: int | str = 0,
        note: str = "",
    ) -> dict:
        resp = self.session.post(
            f"{self.base_url}/entries",
            json={
                "date": date,
                "type": type,
                "minutes": minutes,
                "value": value,
                "note": note,
            },
        )
        resp.raise_for_status()
        return resp.json()

    def list_entries(self, date: Optional[str] = None) -> list[dict]:
        params = {"date": date} if date else {}
        resp = self.session.get(f"{self.base_url}/entries", params=params)
        resp.raise_for_status()
        return resp.json()

    def get_entry(self, entry_id: str) -> dict:
        resp = self.session.get(f"{self.base_url}/entries/{entry_id}")
        resp.raise_for_status()
        return resp.json()

    def summary(self, date: Optional[str] = None) -> dict:
        params = {"date": date} if date else {}
        resp = self.session.get(f"{self.base_url}/entries/summary", params=params)
        resp.raise_for_status()
        return resp.json()

    def delete_entry(self, entry_id: str) -> None:
        resp = self.session.delete(f"{self.base_url}/entries/{entry_id}")
        resp.raise_for_status()

    def clear_entries(self) -> None:
        resp = self.session.delete(f"{self.base_url}/entries")
        resp.raise_for_status()
