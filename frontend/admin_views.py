# frontend/admin_views.py
import calendar
import logging
from datetime import date, timedelta

from django.contrib import messages
from django.shortcuts import render, redirect
from django.urls import reverse
from django.views.decorators.http import require_POST

from .api import admin as admin_api
from .decorators import staff_required
from .exceptions import APIResponseError, SessionExpiredError
from .forms import BlockForm, BlockReasonForm, MemberAdminForm, PaymentDeadlineForm
from .grid import COURTS, parse_day
from .views import local_now

logger = logging.getLogger(__name__)

AUDIT_TYPES = [
    ("", "Alle"),
    ("reservation", "Buchungen"),
    ("block", "Sperrungen"),
    ("member", "Mitglieder"),
    ("reason", "Sperrgründe"),
    ("settings", "Einstellungen"),
]


def _report(request, call, success, failure):
    """Run a backend write and flash the outcome; True on success."""
    try:
        call()
    except SessionExpiredError:
        raise
    except APIResponseError as e:
        logger.info("%s: %s", failure, e)
        messages.error(request, e.payload.get("error") or failure)
        return False
    messages.success(request, success)
    return True


# -------------------------
# Overview + Settings
# -------------------------
@staff_required
def admin_home(request):
    """Entry page; payment confirmations are only loaded for administrators."""
    pending = []
    if request.member.is_admin:
        pending = admin_api.get_pending_payment_confirmations(request.api)
    return render(request, "frontend/admin/home.html", {"pending_confirmations": pending})


@staff_required
@require_POST
def confirm_member_payment(request, member_id):
    _report(
        request,
        lambda: admin_api.update_member(request.api, member_id, {"fee_paid": True}),
        "Zahlung bestätigt",
        "Fehler beim Bestätigen",
    )
    return redirect("admin-home")


@staff_required
@require_POST
def reject_member_payment(request, member_id):
    _report(
        request,
        lambda: admin_api.reject_payment_confirmation(request.api, member_id),
        "Anfrage abgelehnt",
        "Fehler beim Ablehnen",
    )
    return redirect("admin-home")


@staff_required
def admin_settings(request):
    if request.method == "POST":
        if request.POST.get("action") == "clear":
            _report(
                request,
                lambda: admin_api.clear_payment_deadline(request.api),
                "Zahlungsfrist entfernt",
                "Fehler beim Entfernen der Frist",
            )
            return redirect("admin-settings")

        form = PaymentDeadlineForm(request.POST)
        if form.is_valid():
            _report(
                request,
                lambda: admin_api.set_payment_deadline(request.api, form.cleaned_data["deadline"].isoformat()),
                "Zahlungsfrist gesetzt",
                "Fehler beim Setzen der Frist",
            )
            return redirect("admin-settings")
    else:
        form = PaymentDeadlineForm()

    return render(request, "frontend/admin/settings.html", {
        "form": form,
        "deadline": admin_api.get_payment_deadline(request.api),
    })


# -------------------------
# Court blocks
# -------------------------
@staff_required
def blocks(request):
    today = local_now().date()
    day = parse_day(request.GET.get("date"), today)
    reasons = [r for r in admin_api.get_block_reasons(request.api) if r.is_active]
    if request.member.is_teamster:
        reasons = [r for r in reasons if r.teamster_usable]

    if request.method == "POST":
        form = BlockForm(request.POST, reasons=reasons)
        if form.is_valid():
            created = _report(
                request,
                lambda: admin_api.create_blocks(request.api, form.to_api()),
                "Sperrung erstellt",
                "Fehler beim Erstellen der Sperrung",
            )
            if created:
                return redirect(f"{reverse('admin-blocks')}?date={form.cleaned_data['start_date'].isoformat()}")
    else:
        form = BlockForm(reasons=reasons, initial={"start_date": day, "end_date": day})

    items = admin_api.get_blocks(request.api, day=day.isoformat())
    delete_batch = request.GET.get("delete")
    return render(request, "frontend/admin/blocks.html", {
        "day": day,
        "form": form,
        "blocks": sorted(items, key=lambda b: (b.start_time, b.court_number)),
        "delete_block": next((b for b in items if b.batch_id and b.batch_id == delete_batch), None),
    })


@staff_required
@require_POST
def delete_block(request, batch_id):
    _report(
        request,
        lambda: admin_api.delete_block_batch(request.api, batch_id),
        "Sperrung gelöscht",
        "Fehler beim Löschen der Sperrung",
    )
    day = request.POST.get("date", "")
    return redirect(f"{reverse('admin-blocks')}?date={day}" if day else "admin-blocks")


@staff_required
def block_calendar(request):
    """Month view of all blocks."""
    today = local_now().date()
    try:
        year, month = (int(part) for part in request.GET.get("month", "").split("-"))
        first = date(year, month, 1)
    except ValueError:
        first = today.replace(day=1)
    last = first.replace(day=calendar.monthrange(first.year, first.month)[1])

    items = admin_api.get_blocks(request.api, start_date=first.isoformat(), end_date=last.isoformat())
    by_day = {}
    for block in items:
        by_day.setdefault(block.date, []).append(block)

    weeks = [
        [(day, day.month == first.month, by_day.get(day, [])) for day in week]
        for week in calendar.Calendar().monthdatescalendar(first.year, first.month)
    ]
    return render(request, "frontend/admin/calendar.html", {
        "month": first,
        "today": today,
        "weeks": weeks,
        "prev_month": (first - timedelta(days=1)).replace(day=1),
        "next_month": last + timedelta(days=1),
        "courts": COURTS,
    })


# -------------------------
# Block reasons
# -------------------------
@staff_required
def block_reasons(request):
    reasons = admin_api.get_block_reasons(request.api)
    form = None
    editing = None

    if request.GET.get("new"):
        form = BlockReasonForm()
    edit_id = request.GET.get("edit", "")
    if edit_id.isdigit():
        editing = next((r for r in reasons if r.id == int(edit_id)), None)
        if editing:
            form = BlockReasonForm(initial={
                "name": editing.name,
                "teamster_usable": editing.teamster_usable,
                "is_temporary": editing.is_temporary,
            })

    if request.method == "POST":
        form = BlockReasonForm(request.POST)
        reason_id = request.POST.get("reason_id", "")
        if form.is_valid():
            data = form.cleaned_data
            if reason_id.isdigit():
                ok = _report(
                    request,
                    lambda: admin_api.update_block_reason(request.api, int(reason_id), data),
                    "Sperrgrund aktualisiert",
                    "Fehler beim Aktualisieren des Sperrgrundes",
                )
            else:
                ok = _report(
                    request,
                    lambda: admin_api.create_block_reason(
                        request.api, data["name"], data["teamster_usable"], data["is_temporary"]
                    ),
                    "Sperrgrund erstellt",
                    "Fehler beim Erstellen des Sperrgrundes",
                )
            if ok:
                return redirect("admin-reasons")
        if reason_id.isdigit():
            editing = next((r for r in reasons if r.id == int(reason_id)), None)

    delete_id = request.GET.get("delete", "")
    return render(request, "frontend/admin/reasons.html", {
        "reasons": reasons,
        "form": form,
        "editing": editing,
        "delete_reason": next((r for r in reasons if delete_id.isdigit() and r.id == int(delete_id)), None),
    })


@staff_required
@require_POST
def toggle_reason_teamster(request, reason_id):
    _report(
        request,
        lambda: admin_api.update_block_reason(
            request.api, reason_id, {"teamster_usable": request.POST.get("teamster_usable") == "on"}
        ),
        "Sperrgrund aktualisiert",
        "Fehler beim Aktualisieren des Sperrgrundes",
    )
    return redirect("admin-reasons")


@staff_required
@require_POST
def delete_reason(request, reason_id):
    _report(
        request,
        lambda: admin_api.delete_block_reason(request.api, reason_id),
        "Sperrgrund gelöscht",
        "Fehler beim Löschen des Sperrgrundes",
    )
    return redirect("admin-reasons")


# -------------------------
# Members
# -------------------------
def filter_members(members, query="", role="", status=""):
    needle = query.lower()
    result = []
    for member in members:
        if needle and needle not in member.full_name.lower() and needle not in member.email.lower():
            continue
        if role and member.role != role:
            continue
        if status == "active" and not member.is_active:
            continue
        if status == "inactive" and member.is_active:
            continue
        if status == "unpaid" and member.fee_paid is not False:
            continue
        result.append(member)
    return sorted(result, key=lambda m: (m.lastname.lower(), m.firstname.lower()))


@staff_required
def members(request):
    query = request.GET.get("q", "").strip()
    role = request.GET.get("role", "")
    status = request.GET.get("status", "")
    return render(request, "frontend/admin/members.html", {
        "members": filter_members(admin_api.get_members(request.api), query, role, status),
        "query": query,
        "role": role,
        "status": status,
        "roles": MemberAdminForm.ROLE_CHOICES,
    })


@staff_required
def member_detail(request, member_id):
    member = admin_api.get_member(request.api, member_id)
    if request.method == "POST":
        form = MemberAdminForm(request.POST)
        if form.is_valid():
            _report(
                request,
                lambda: admin_api.update_member(request.api, member_id, form.cleaned_data),
                "Mitglied gespeichert",
                "Fehler beim Speichern",
            )
            return redirect("admin-member", member_id=member_id)
    else:
        form = MemberAdminForm.for_member(member)
    return render(request, "frontend/admin/member_detail.html", {"subject": member, "form": form})


@staff_required
@require_POST
def member_active(request, member_id):
    if request.POST.get("active") == "1":
        _report(
            request,
            lambda: admin_api.reactivate_member(request.api, member_id),
            "Mitglied reaktiviert",
            "Fehler beim Reaktivieren",
        )
    else:
        _report(
            request,
            lambda: admin_api.deactivate_member(request.api, member_id),
            "Mitglied deaktiviert",
            "Fehler beim Deaktivieren",
        )
    return redirect("admin-member", member_id=member_id)


# -------------------------
# Audit log + Feature flags
# -------------------------
@staff_required
def audit_log(request):
    log_type = request.GET.get("type", "")
    if log_type not in dict(AUDIT_TYPES):
        log_type = ""
    return render(request, "frontend/admin/audit.html", {
        "entries": admin_api.get_audit_log(request.api, log_type or None),
        "log_type": log_type,
        "types": AUDIT_TYPES,
    })


@staff_required
def feature_flags(request):
    return render(request, "frontend/admin/features.html", {
        "flags": admin_api.get_feature_flags(request.api),
    })


@staff_required
@require_POST
def toggle_feature_flag(request, flag_id):
    _report(
        request,
        lambda: admin_api.update_feature_flag(request.api, flag_id, request.POST.get("is_enabled") == "1"),
        "Feature Flag aktualisiert",
        "Fehler beim Aktualisieren",
    )
    return redirect("admin-features")
