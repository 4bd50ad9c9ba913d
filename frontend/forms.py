from django import forms

from frontend.grid import COURTS, slot_times

MAX_PICTURE_SIZE = 5 * 1024 * 1024
TIME_CHOICES = [(t, t) for t in slot_times()] + [("22:00", "22:00")]


class LoginForm(forms.Form):
    email = forms.EmailField(label="E-Mail")
    password = forms.CharField(label="Passwort", widget=forms.PasswordInput)


class BookingForm(forms.Form):
    court_id = forms.TypedChoiceField(choices=[(c, c) for c in COURTS], coerce=int)
    date = forms.DateField()
    start_time = forms.ChoiceField(choices=[(t, t) for t in slot_times()])
    booked_for_id = forms.CharField(required=False)

    def clean_booked_for_id(self):
        return self.cleaned_data["booked_for_id"] or None


class ProfileForm(forms.Form):
    firstname = forms.CharField(label="Vorname", max_length=50)
    lastname = forms.CharField(label="Nachname", max_length=50)
    email = forms.EmailField(label="E-Mail")
    phone = forms.CharField(label="Telefon", max_length=30, required=False)
    street = forms.CharField(label="Straße", max_length=100, required=False)
    zip_code = forms.CharField(label="PLZ", max_length=10, required=False)
    city = forms.CharField(label="Ort", max_length=100, required=False)

    @classmethod
    def for_member(cls, member):
        return cls(initial={
            "firstname": member.firstname,
            "lastname": member.lastname,
            "email": member.email,
            "phone": member.phone,
            "street": member.street,
            "zip_code": member.zip_code,
            "city": member.city,
        })


class NotificationForm(forms.Form):
    notifications_enabled = forms.BooleanField(label="E-Mail-Benachrichtigungen", required=False)
    notify_own_bookings = forms.BooleanField(label="Eigene Buchungen", required=False)
    notify_other_bookings = forms.BooleanField(label="Buchungen anderer", required=False)
    notify_court_blocked = forms.BooleanField(label="Platzsperrungen", required=False)
    notify_booking_overridden = forms.BooleanField(label="Buchung überschrieben", required=False)

    @classmethod
    def for_member(cls, member):
        return cls(initial={name: getattr(member, name) for name in cls.base_fields})


class PasswordChangeForm(forms.Form):
    current_password = forms.CharField(
        label="Aktuelles Passwort",
        widget=forms.PasswordInput,
        required=False,
    )
    new_password = forms.CharField(label="Neues Passwort", widget=forms.PasswordInput, min_length=8)
    confirm_password = forms.CharField(label="Passwort bestätigen", widget=forms.PasswordInput)

    def clean_current_password(self):
        value = self.cleaned_data.get("current_password")
        if not value:
            raise forms.ValidationError("Aktuelles Passwort erforderlich")
        return value

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("new_password") and cleaned.get("new_password") != cleaned.get("confirm_password"):
            raise forms.ValidationError("Passwörter stimmen nicht überein")
        return cleaned


class ProfilePictureForm(forms.Form):
    picture = forms.FileField(label="Profilbild")

    def clean_picture(self):
        picture = self.cleaned_data["picture"]
        if not (picture.content_type or "").startswith("image/"):
            raise forms.ValidationError("Bitte wähle eine Bilddatei aus")
        if picture.size > MAX_PICTURE_SIZE:
            raise forms.ValidationError("Das Bild darf maximal 5 MB groß sein")
        return picture


# -------------------------
# Admin
# -------------------------
class BlockForm(forms.Form):
    court_ids = forms.TypedMultipleChoiceField(
        label="Plätze",
        choices=[(c, f"Platz {c}") for c in COURTS],
        coerce=int,
        widget=forms.CheckboxSelectMultiple,
    )
    start_date = forms.DateField(label="Von", widget=forms.DateInput(attrs={"type": "date"}))
    end_date = forms.DateField(label="Bis", widget=forms.DateInput(attrs={"type": "date"}))
    start_time = forms.ChoiceField(label="Startzeit", choices=TIME_CHOICES)
    end_time = forms.ChoiceField(label="Endzeit", choices=TIME_CHOICES)
    reason_id = forms.TypedChoiceField(label="Sperrgrund", coerce=int)
    details = forms.CharField(label="Details", required=False, max_length=255)

    def __init__(self, *args, reasons=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["reason_id"].choices = [(r.id, r.name) for r in reasons]

    def clean(self):
        cleaned = super().clean()
        start_date, end_date = cleaned.get("start_date"), cleaned.get("end_date")
        if start_date and end_date and end_date < start_date:
            raise forms.ValidationError("Das Enddatum muss nach dem Startdatum liegen")
        start_time, end_time = cleaned.get("start_time"), cleaned.get("end_time")
        if start_time and end_time and end_time <= start_time:
            raise forms.ValidationError("Die Endzeit muss nach der Startzeit liegen")
        return cleaned

    def to_api(self):
        data = self.cleaned_data
        return {
            "court_ids": data["court_ids"],
            "start_date": data["start_date"].isoformat(),
            "end_date": data["end_date"].isoformat(),
            "start_time": data["start_time"],
            "end_time": data["end_time"],
            "reason_id": data["reason_id"],
            "details": data["details"],
        }


class BlockReasonForm(forms.Form):
    name = forms.CharField(label="Name", max_length=50)
    teamster_usable = forms.BooleanField(label="Platzwarte erlaubt", required=False)
    is_temporary = forms.BooleanField(label="Vorübergehende Sperre", required=False)


class MemberAdminForm(forms.Form):
    ROLE_CHOICES = [
        ("member", "Mitglied"),
        ("teamster", "Platzwart"),
        ("administrator", "Administrator"),
    ]
    MEMBERSHIP_CHOICES = [
        ("full", "Vollmitglied"),
        ("sustaining", "Fördermitglied"),
    ]

    firstname = forms.CharField(label="Vorname", max_length=50)
    lastname = forms.CharField(label="Nachname", max_length=50)
    email = forms.EmailField(label="E-Mail")
    role = forms.ChoiceField(label="Rolle", choices=ROLE_CHOICES)
    membership_type = forms.ChoiceField(label="Mitgliedschaft", choices=MEMBERSHIP_CHOICES)
    fee_paid = forms.BooleanField(label="Beitrag bezahlt", required=False)

    @classmethod
    def for_member(cls, member):
        return cls(initial={
            "firstname": member.firstname,
            "lastname": member.lastname,
            "email": member.email,
            "role": member.role,
            "membership_type": member.membership_type,
            "fee_paid": bool(member.fee_paid),
        })


class PaymentDeadlineForm(forms.Form):
    deadline = forms.DateField(label="Zahlungsfrist", widget=forms.DateInput(attrs={"type": "date"}))
