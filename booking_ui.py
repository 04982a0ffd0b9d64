from datetime import date, datetime

import streamlit as st

from app.client.api_client import BookingApiClient, BookingsCache, CacheStatus
from app.client.form import GENDERS, INCOMPLETE_WARNING, BookingForm
from app.core.config import settings
from app.core.exceptions import BookingApiError, IncompleteBookingError
from app.core.logger import setup_logging

# Page Config
st.set_page_config(
    page_title="Travel Booking System",
    page_icon="✈️",
    layout="centered"
)

FIELD_KEYS = {
    "name": "field_name",
    "email": "field_email",
    "from": "field_from",
    "to": "field_to",
    "travelDate": "field_travel_date",
    "time": "field_time",
    "gender": "field_gender",
    "numberOfPeople": "field_people",
}


def _widget_value(field, value):
    """Draft value -> what the matching widget expects."""
    if field == "travelDate":
        try:
            return date.fromisoformat(value) if value else None
        except ValueError:
            return None
    if field == "time":
        try:
            return datetime.strptime(value, "%H:%M").time() if value else None
        except ValueError:
            return None
    if field == "numberOfPeople":
        return value or 1
    return value


def sync_widgets(form: BookingForm):
    for field, key in FIELD_KEYS.items():
        st.session_state[key] = _widget_value(field, form.draft.get(field))


def on_submit():
    form = st.session_state.form
    for field, key in FIELD_KEYS.items():
        form.set_field(field, st.session_state.get(key))

    try:
        form.submit(st.session_state.cache)
    except IncompleteBookingError:
        st.session_state.flash = ("warning", INCOMPLETE_WARNING)
        return
    except BookingApiError as e:
        st.session_state.flash = ("error", f"Error saving booking: {e}")
        return

    sync_widgets(form)


def on_edit(booking):
    form = st.session_state.form
    form.start_edit(booking)
    sync_widgets(form)


def on_delete(booking_id):
    try:
        st.session_state.form.delete(st.session_state.cache, booking_id)
    except BookingApiError as e:
        st.session_state.flash = ("error", f"Error deleting booking: {e}")


# Session setup (runs once per browser session)
if "cache" not in st.session_state:
    setup_logging(error_log="")
    st.session_state.cache = BookingsCache(BookingApiClient(settings.BOOKING_API_URL))
    st.session_state.form = BookingForm()
    st.session_state.flash = None
    sync_widgets(st.session_state.form)
    with st.spinner("Loading..."):
        st.session_state.cache.refresh()

cache = st.session_state.cache
form = st.session_state.form

if cache.status == CacheStatus.LOADING:
    st.info("Loading...")
    st.stop()
if cache.status == CacheStatus.ERROR:
    st.error("Error fetching data")
    if st.button("Retry"):
        cache.refresh()
        st.rerun()
    st.stop()

# Header
st.title("Travel Booking System")

if st.session_state.flash:
    level, message = st.session_state.flash
    getattr(st, level)(message)
    st.session_state.flash = None

with st.form("booking_form"):
    st.text_input("Name", key=FIELD_KEYS["name"])
    st.text_input("Email", key=FIELD_KEYS["email"])
    st.text_input("From", key=FIELD_KEYS["from"])
    st.text_input("To", key=FIELD_KEYS["to"])
    st.date_input("Travel date", key=FIELD_KEYS["travelDate"])
    st.time_input("Time", key=FIELD_KEYS["time"], step=60)
    st.selectbox(
        "Gender",
        options=("",) + GENDERS,
        format_func=lambda g: g or "Select Gender",
        key=FIELD_KEYS["gender"],
    )
    st.number_input("Number of people", min_value=1, step=1, key=FIELD_KEYS["numberOfPeople"])
    st.form_submit_button(
        "Update Booking" if form.is_editing else "Book",
        on_click=on_submit,
        use_container_width=True,
    )

# Detailed list
for booking in cache.bookings:
    with st.container(border=True):
        st.markdown(
            f"**Name:** {booking.name}  \n"
            f"**From:** {booking.from_} → **To:** {booking.to}  \n"
            f"**Travel Date:** {booking.travelDate}  \n"
            f"**Time:** {booking.time}  \n"
            f"**Gender:** {booking.gender}  \n"
            f"**People:** {booking.numberOfPeople}"
        )
        col1, col2 = st.columns(2)
        col1.button("Edit", key=f"detail-edit-{booking.id}", on_click=on_edit, args=(booking,))
        col2.button("Delete", key=f"detail-delete-{booking.id}", on_click=on_delete, args=(booking.id,))

# Compact list
st.markdown("---")
st.subheader("Bookings List")
for booking in cache.bookings:
    col_text, col_edit, col_delete = st.columns([6, 1, 1])
    col_text.markdown(f"**{booking.name}** - {booking.from_} to {booking.to} on {booking.travelDate}")
    col_edit.button("Edit", key=f"list-edit-{booking.id}", on_click=on_edit, args=(booking,))
    col_delete.button("Delete", key=f"list-delete-{booking.id}", on_click=on_delete, args=(booking.id,))
