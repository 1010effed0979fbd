CREATE_EVENT_URL = "/api/v1/events"
GET_EVENT_INFO_URL = "/api/v1/events/{event_id}"
GET_SUMMARY_URL = "/api/v1/events/{event_id}/summary"
SUBMIT_RSVP_URL = "/api/v1/rsvp/{event_id}"
