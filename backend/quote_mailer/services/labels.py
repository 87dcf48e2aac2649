"""
Static email strings in English and French.

Strings are looked up by (language, label_id).  Customer-detail field labels
have a second layer: in the detailed handler a caller-supplied label_* value
wins, and when it is absent the *English* default is used whatever the
language.  The storefront sends translated labels itself, so the asymmetry is
kept as-is.
"""

from typing import Optional

ENGLISH = "en"
FRENCH = "fr"

_LABELS: dict[tuple[str, str], str] = {
    # Body
    (ENGLISH, "heading"): "Thank you for your order!",
    (FRENCH, "heading"): "Merci pour votre commande!",
    (ENGLISH, "intro"): (
        "We’ve received your details and will now calculate the most efficient "
        "and cost-effective shipping option to make sure your products arrive safely."
        "<br>Our team will get back to you within the next hours with a complete "
        "quote including shipping costs and delivery timeline."
    ),
    (FRENCH, "intro"): (
        "Nous avons reçu vos informations et allons maintenant calculer l'option "
        "d'expédition la plus efficace et la plus rentable afin que vos produits "
        "arrivent en toute sécurité.<br>Notre équipe vous recontactera dans "
        "les prochaines heures avec un devis complet incluant les frais de livraison "
        "et le délai."
    ),
    (ENGLISH, "reminder_title"): "Reminder:",
    (FRENCH, "reminder_title"): "Rappel :",
    (ENGLISH, "reminder"): (
        "It’s never too late to modify or clarify your order. If you’d like to "
        "adjust anything, simply reply to this email. You can also reach us "
        "directly at"
    ),
    (FRENCH, "reminder"): (
        "Il n'est jamais trop tard pour modifier ou clarifier votre commande. Si vous "
        "souhaitez apporter des modifications, répondez simplement à cet e-mail. "
        "Vous pouvez également nous contacter directement au"
    ),
    # Items table
    (ENGLISH, "cart_items"): "Cart Items",
    (FRENCH, "cart_items"): "Articles du panier",
    (ENGLISH, "product"): "Product",
    (FRENCH, "product"): "Produit",
    (ENGLISH, "quantity"): "Quantity",
    (FRENCH, "quantity"): "Quantité",
    (ENGLISH, "price"): "Price",
    (FRENCH, "price"): "Prix",
    (ENGLISH, "subtotal"): "Subtotal",
    (FRENCH, "subtotal"): "Sous-total",
    # Footer
    (ENGLISH, "contact_us"): "Contact Us",
    (FRENCH, "contact_us"): "Contactez-nous",
    (ENGLISH, "website"): "Website",
    (FRENCH, "website"): "Site Web",
    (ENGLISH, "footer_email"): "Email",
    (FRENCH, "footer_email"): "Courriel",
    (ENGLISH, "phone"): "Phone",
    (FRENCH, "phone"): "Téléphone",
    # Subject lines
    (ENGLISH, "admin_subject"): "New Quote Request from",
    (FRENCH, "admin_subject"): "Nouvelle demande de devis de",
    (ENGLISH, "customer_subject"): "Quote Request Received -",
    (FRENCH, "customer_subject"): "Demande de devis reçue -",
    # Customer details
    (ENGLISH, "field_name"): "Name",
    (FRENCH, "field_name"): "Nom",
    (ENGLISH, "field_email"): "Email",
    (FRENCH, "field_email"): "Courriel",
    (ENGLISH, "field_invoice_contact"): "Contact for Invoicing",
    (FRENCH, "field_invoice_contact"): "Contact pour la facturation",
    (ENGLISH, "field_street"): "Street Address",
    (FRENCH, "field_street"): "Adresse",
    (ENGLISH, "field_city"): "City",
    (FRENCH, "field_city"): "Ville",
    (ENGLISH, "field_province"): "Province/State",
    (FRENCH, "field_province"): "Province/État",
    (ENGLISH, "field_postal_code"): "Postal Code",
    (FRENCH, "field_postal_code"): "Code postal",
    (ENGLISH, "field_country"): "Country",
    (FRENCH, "field_country"): "Pays",
    (ENGLISH, "field_contact"): "Preferred Contact",
    (FRENCH, "field_contact"): "Moyen de contact préféré",
    (ENGLISH, "field_delivery"): "Delivery Options",
    (FRENCH, "field_delivery"): "Options de livraison",
    (ENGLISH, "field_location"): "Location",
    (FRENCH, "field_location"): "Emplacement",
    (ENGLISH, "field_notes"): "Notes / Instructions",
    (FRENCH, "field_notes"): "Notes / Instructions",
}


def resolve_language(language: Optional[str]) -> str:
    """"fr" selects French; anything else (including None) is English."""
    return FRENCH if language == FRENCH else ENGLISH


def translate(language: Optional[str], label_id: str) -> str:
    """Return the static string for label_id in the selected language."""
    return _LABELS[(resolve_language(language), label_id)]


def field_label(
    field_id: str,
    language: Optional[str],
    override: Optional[str] = None,
    use_overrides: bool = True,
) -> str:
    """
    Label for a customer-details field.

    With use_overrides (detailed handler): a non-empty override wins,
    otherwise the English default, ignoring language.
    Without it (simple handler): the language table.
    """
    if use_overrides:
        if override:
            return override
        return _LABELS[(ENGLISH, f"field_{field_id}")]
    return translate(language, f"field_{field_id}")
