"""User-facing error and status messages, grouped by resource."""


class AuthMessages:
    NOT_AUTHENTICATED = "Authentication required"
    INVALID_TOKEN = "Invalid or expired token"
    USER_NOT_FOUND = "User not found"
    INVALID_CREDENTIALS = "Invalid credentials"
    USER_EXISTS = "Username or email already exists"
    INVALID_USERNAME = (
        "Username must be 3-20 characters and contain only letters, numbers, underscores, and hyphens"
    )
    PASSWORD_TOO_SHORT = "Password must be at least 8 characters"
    PASSWORD_TOO_WEAK = "Password must contain at least one letter and one number"
    RESET_REQUESTED = "If an account exists with that email, a password reset link has been sent."
    RESET_TOKEN_INVALID = "Invalid or expired reset token"
    RESET_COMPLETE = "Password has been reset successfully"


class CampaignMessages:
    NOT_FOUND = "Campaign not found"
    NO_ACCESS = "You are not a participant in this campaign"
    DM_REQUIRED = "DM access required"
    OWNER_REQUIRED = "Only the campaign owner can perform this action"


class ParticipantMessages:
    NOT_FOUND = "Participant not found"
    USER_NOT_FOUND = "User not found with that email"
    ALREADY_PARTICIPANT = "User is already a participant in this campaign"
    CANNOT_CHANGE_OWNER = "Cannot change campaign owner's role"
    CANNOT_REMOVE_OWNER = "Cannot remove campaign owner"


class CharacterMessages:
    NOT_FOUND = "Character not found"
    NAME_REQUIRED = "Name is required"
    EDIT_FORBIDDEN = "You can only edit your own character or NPCs you created"
    DELETE_FORBIDDEN = "You can only delete NPCs you created"
    INVALID_PLAYER = "Assigned player is not a participant in this campaign"


class LocationMessages:
    NOT_FOUND = "Location not found"
    INVALID_PARENT = "Invalid parent location"
    SELF_PARENT = "A location cannot be its own parent"
    PARENT_CYCLE = "A location cannot be nested inside one of its own descendants"
    HAS_CHILDREN = (
        "Cannot delete location with child locations. Please delete or move child locations first."
    )


class FactionMessages:
    NOT_FOUND = "Faction not found"


class WorldInfoMessages:
    NOT_FOUND = "World info not found"


class QuestMessages:
    NOT_FOUND = "Quest not found"
    LINK_NOT_FOUND = "Quest link not found"
    LINK_ENTITY_REQUIRED = "Linked entity is required"
    OBJECTIVE_NOT_FOUND = "Objective not found"
    SESSION_NOT_FOUND = "Session not found"
    OBJECTIVE_TITLE_REQUIRED = "Objective title is required"
    MILESTONE_TITLE_REQUIRED = "Milestone title is required"


class SessionMessages:
    NOT_FOUND = "Session not found"
    EDIT_FORBIDDEN = "You can only edit sessions you created"
    DELETE_FORBIDDEN = "You can only delete sessions you created"
    POST_FORBIDDEN = "You can only post notes to sessions you created"
    INVALID_ENTITY_TYPE = "Invalid entity type"
    ENTITY_NOT_FOUND = "Entity not found"
    NOTE_NOT_FOUND = "Note not found"
    NOTE_EDIT_FORBIDDEN = "You can only edit your own notes"
    NOTE_DELETE_FORBIDDEN = "You can only delete your own notes"
    NOTE_POSTED = "Note posted successfully"


class CreatureMessages:
    NOT_FOUND = "Creature not found"
    SIZE_REQUIRED = "Size is required"
    TYPE_REQUIRED = "Creature type is required"
    ARMOR_CLASS_REQUIRED = "Armor Class value is required"
    HIT_POINTS_REQUIRED = "Hit Points average is required"
    ABILITIES_REQUIRED = "All ability scores (str, dex, con, int, wis, cha) are required"


class ContentMessages:
    NOT_FOUND = "Content not found"


class TagMessages:
    NOT_FOUND = "Tag not found"
    DUPLICATE_NAME = "A tag with this name already exists"
    FOREIGN_TAGS = "One or more tags not found or don't belong to this campaign"
    INVALID_ENTITY_TYPE = "Invalid entity type"
    ENTITY_NOT_FOUND = "Entity not found"


class ImageMessages:
    NOT_FOUND = "Image not found"
    FILE_NOT_FOUND = "Image file not found"
    NO_FILE = "No file uploaded"
    INVALID_TYPE = "Invalid file type. Only JPEG, PNG, GIF, and WebP images are allowed."
    TOO_LARGE = "File is too large. Maximum size is 10MB."
    INVALID_ENTITY_TYPE = "Invalid entity type"
    ENTITY_NOT_FOUND = "Entity not found"


class ServerMessages:
    INTERNAL_ERROR = "Internal server error"
