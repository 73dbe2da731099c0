"""Services orchestrating one interaction: receive, assemble, invoke, record."""
