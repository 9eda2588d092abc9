from quotedesk.constants.activity_codes import ActivityCode


ACTIVITY_TEMPLATES = {
    # ---------------- AUTH ----------------
    ActivityCode.LOGIN:
        "{actor_role} ({actor_email}) logged in",

    ActivityCode.LOGOUT:
        "{actor_role} ({actor_email}) logged out",

    # ---------------- QUOTES ----------------
    ActivityCode.QUOTE_SUBMITTED:
        "{requester_name} ({requester_email}) requested a quote for {service} (#{target_id})",

    ActivityCode.UPDATE_QUOTE:
        "{actor_role} ({actor_email}) updated quote #{target_id}: {changes}",

    ActivityCode.APPROVE_QUOTES:
        "{actor_role} ({actor_email}) approved {count} quote(s): {target_ids}",

    ActivityCode.REJECT_QUOTES:
        "{actor_role} ({actor_email}) rejected {count} quote(s): {target_ids}",

    ActivityCode.TRASH_QUOTES:
        "{actor_role} ({actor_email}) moved {count} quote(s) to trash: {target_ids}",

    ActivityCode.RESTORE_QUOTES:
        "{actor_role} ({actor_email}) restored {count} quote(s) to pending: {target_ids}",

    ActivityCode.PURGE_QUOTES:
        "{actor_role} ({actor_email}) permanently deleted {count} quote(s): {target_ids}",
}
