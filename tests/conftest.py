"""Shared fixtures for the analytics tests."""

import pytest


@pytest.fixture
def raw_activities() -> list[dict]:
    """Ticket records as the ticket store returns them (snake_case keys)."""
    return [
        {
            "referenceid": "A1",
            "manager": "M1",
            "traffic": "Sales",
            "status": "Converted into Sales",
            "remarks": "Sold",
            "wrap_up": "Customer Order",
            "customer_status": "New Client",
            "so_amount": "1500",
            "qty_sold": "3",
            "date_created": "2024-03-01T09:00:00",
            "date_updated": "2024-03-09T10:00:00",
            "ticket_received": "2024-03-01T09:00:00",
            "ticket_endorsed": "2024-03-01T09:05:00",
            "tsa_acknowledge_date": "2024-03-01T09:15:00",
            "tsa_handling_time": "2024-03-01T10:00:00",
        },
        {
            "referenceid": "A1",
            "manager": "M1",
            "traffic": "Non-Sales",
            "status": "Closed",
            "remarks": "Assisted",
            "wrap_up": "Customer Inquiry Non-Sales",
            "customer_status": "Existing Active",
            "date_created": "2024-03-02T11:00:00",
            "ticket_received": "2024-03-02T11:00:00",
            "tsa_handling_time": "2024-03-02T11:30:00",
        },
        {
            "referenceid": "A2",
            "manager": "M1",
            "traffic": "Sales",
            "status": "Converted into Sales",
            "remarks": "Quotation for Approval",
            "customer_status": "Existing Active",
            "so_amount": 4000,
            "qty_sold": 2,
            "date_created": "2024-03-20T15:00:00",
            "date_updated": "2024-03-25T08:00:00",
        },
        {
            "referenceid": "A3",
            "traffic": "Sales",
            "status": "Converted into Sales",
            "so_amount": "999",
            "date_created": "2024-04-02T08:00:00",
        },
        {
            "referenceid": "  ",
            "traffic": "Sales",
            "date_created": "2024-03-03T08:00:00",
        },
    ]


@pytest.fixture
def people_records() -> list[dict]:
    return [
        {"ReferenceID": "A1", "Firstname": "Maria", "Lastname": "Santos"},
        {"ReferenceID": "A2", "Firstname": "Jose", "Lastname": "Reyes"},
        {"ReferenceID": "M1", "Firstname": "Ana", "Lastname": "Cruz"},
    ]
