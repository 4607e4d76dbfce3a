"""
Display labels for the supported languages.

Labels are cosmetic only. Nothing numeric or ledger-related ever
depends on them.
"""

from typing import Final


DEFAULT_LANGUAGE: Final = "en"

LANGUAGE_NAMES: Final = {
    "en": "English",
    "es": "Español",
    "fr": "Français",
}

TRANSLATIONS: Final[dict[str, dict[str, str]]] = {
    "en": {
        # Navigation
        "dashboard": "Dashboard",
        "purchases": "Purchases",
        "sales": "Sales",
        "inventory": "Inventory",
        "accounting": "Accounting",
        "aiAnalyst": "AI Analyst",
        "settings": "Settings",
        # Dashboard
        "execOverview": "Executive overview of your business",
        "totalStockValue": "Total Stock Value",
        "totalRevenue": "Total Revenue",
        "totalExpenses": "Total Purchases",
        "netCashFlow": "Net Cash Flow",
        "inventoryValuation": "Inventory Valuation",
        "recentSales": "Recent Sales",
        "noData": "No data yet",
        # Purchases
        "procurement": "Procurement and supplier purchases",
        "newPurchase": "New Purchase",
        "searchPurchases": "Search purchases...",
        "allSuppliers": "All suppliers",
        "productName": "Product Name",
        "sku": "SKU",
        "supplier": "Supplier",
        "unitCost": "Unit Cost",
        "confirm": "Confirm",
        "cancel": "Cancel",
        # Sales
        "trackRevenue": "Track revenue and customer sales",
        "recordSale": "Record Sale",
        "searchSales": "Search sales...",
        "customer": "Customer",
        "unitPrice": "Unit Price",
        # Inventory
        "realTimeStock": "Real-time stock levels and valuation",
        "manageStock": "Manage Stock",
        "product": "Product",
        "quantity": "Quantity",
        "avgCost": "Avg. Cost",
        "totalValue": "Total Value",
        "stockStatus": "Stock Status",
        "inStock": "In Stock",
        "lowStock": "Low Stock",
        "outOfStock": "Out of Stock",
        # Accounting
        "financialAccounting": "Double-entry financial accounting",
        "generalLedger": "General Ledger",
        "accountBalances": "Account Balances",
        "trialBalance": "Trial Balance",
        "manualEntry": "Manual Entry",
        "newJournalEntry": "New Journal Entry",
        "postEntry": "Post Entry",
        "account": "Account",
        "debit": "Debit",
        "credit": "Credit",
        "description": "Description",
        "date": "Date",
        "id": "ID",
        "type": "Type",
        "party": "Party",
        "status": "Status",
        "total": "Total",
        "totalAmount": "Total Amount",
        # AI analyst
        "aiGreeting": "Hello! I am your AI financial analyst. Ask me anything about your business.",
        "askAI": "Ask the AI analyst...",
        "typeMessage": "Type your message...",
        "analyzing": "Analyzing your books...",
        "enterApiKey": "Gemini API Key",
        # Settings and profile
        "systemSettings": "System Settings",
        "preferences": "Preferences",
        "language": "Language",
        "currency": "Currency",
        "exportData": "Export Data",
        "importData": "Import Data",
        "save": "Save",
        "profileSetup": "Set up your business profile",
        "setupDescription": "Tell us a little about your business to get started.",
        "yourName": "Your Name",
        "businessName": "Business Name",
        "location": "Location",
        "getStarted": "Get Started",
        "welcome": "Welcome",
        "adminUser": "Admin User",
    },
    "es": {
        "dashboard": "Panel",
        "purchases": "Compras",
        "sales": "Ventas",
        "inventory": "Inventario",
        "accounting": "Contabilidad",
        "aiAnalyst": "Analista IA",
        "settings": "Configuración",
        "execOverview": "Resumen ejecutivo de su negocio",
        "totalStockValue": "Valor Total del Inventario",
        "totalRevenue": "Ingresos Totales",
        "totalExpenses": "Compras Totales",
        "netCashFlow": "Flujo de Caja Neto",
        "inventoryValuation": "Valoración del Inventario",
        "recentSales": "Ventas Recientes",
        "noData": "Sin datos todavía",
        "procurement": "Adquisiciones y compras a proveedores",
        "newPurchase": "Nueva Compra",
        "searchPurchases": "Buscar compras...",
        "allSuppliers": "Todos los proveedores",
        "productName": "Nombre del Producto",
        "sku": "SKU",
        "supplier": "Proveedor",
        "unitCost": "Costo Unitario",
        "confirm": "Confirmar",
        "cancel": "Cancelar",
        "trackRevenue": "Seguimiento de ingresos y ventas",
        "recordSale": "Registrar Venta",
        "searchSales": "Buscar ventas...",
        "customer": "Cliente",
        "unitPrice": "Precio Unitario",
        "realTimeStock": "Niveles de stock y valoración en tiempo real",
        "manageStock": "Gestionar Stock",
        "product": "Producto",
        "quantity": "Cantidad",
        "avgCost": "Costo Prom.",
        "totalValue": "Valor Total",
        "stockStatus": "Estado del Stock",
        "inStock": "En Stock",
        "lowStock": "Stock Bajo",
        "outOfStock": "Agotado",
        "financialAccounting": "Contabilidad financiera de partida doble",
        "generalLedger": "Libro Mayor",
        "accountBalances": "Saldos de Cuentas",
        "trialBalance": "Balance de Comprobación",
        "manualEntry": "Asiento Manual",
        "newJournalEntry": "Nuevo Asiento",
        "postEntry": "Registrar Asiento",
        "account": "Cuenta",
        "debit": "Debe",
        "credit": "Haber",
        "description": "Descripción",
        "date": "Fecha",
        "id": "ID",
        "type": "Tipo",
        "party": "Tercero",
        "status": "Estado",
        "total": "Total",
        "totalAmount": "Importe Total",
        "aiGreeting": "¡Hola! Soy su analista financiero IA. Pregúnteme lo que quiera sobre su negocio.",
        "askAI": "Pregunte al analista IA...",
        "typeMessage": "Escriba su mensaje...",
        "analyzing": "Analizando sus libros...",
        "enterApiKey": "Clave API de Gemini",
        "systemSettings": "Configuración del Sistema",
        "preferences": "Preferencias",
        "language": "Idioma",
        "currency": "Moneda",
        "exportData": "Exportar Datos",
        "importData": "Importar Datos",
        "save": "Guardar",
        "profileSetup": "Configure el perfil de su negocio",
        "setupDescription": "Cuéntenos un poco sobre su negocio para empezar.",
        "yourName": "Su Nombre",
        "businessName": "Nombre del Negocio",
        "location": "Ubicación",
        "getStarted": "Comenzar",
        "welcome": "Bienvenido",
        "adminUser": "Administrador",
    },
    "fr": {
        "dashboard": "Tableau de bord",
        "purchases": "Achats",
        "sales": "Ventes",
        "inventory": "Inventaire",
        "accounting": "Comptabilité",
        "aiAnalyst": "Analyste IA",
        "settings": "Paramètres",
        "execOverview": "Vue d'ensemble de votre entreprise",
        "totalStockValue": "Valeur Totale du Stock",
        "totalRevenue": "Chiffre d'Affaires",
        "totalExpenses": "Achats Totaux",
        "netCashFlow": "Flux de Trésorerie Net",
        "inventoryValuation": "Valorisation du Stock",
        "recentSales": "Ventes Récentes",
        "noData": "Pas encore de données",
        "procurement": "Approvisionnement et achats fournisseurs",
        "newPurchase": "Nouvel Achat",
        "searchPurchases": "Rechercher des achats...",
        "allSuppliers": "Tous les fournisseurs",
        "productName": "Nom du Produit",
        "sku": "Référence",
        "supplier": "Fournisseur",
        "unitCost": "Coût Unitaire",
        "confirm": "Confirmer",
        "cancel": "Annuler",
        "trackRevenue": "Suivi du chiffre d'affaires et des ventes",
        "recordSale": "Enregistrer une Vente",
        "searchSales": "Rechercher des ventes...",
        "customer": "Client",
        "unitPrice": "Prix Unitaire",
        "realTimeStock": "Niveaux de stock et valorisation en temps réel",
        "manageStock": "Gérer le Stock",
        "product": "Produit",
        "quantity": "Quantité",
        "avgCost": "Coût Moyen",
        "totalValue": "Valeur Totale",
        "stockStatus": "État du Stock",
        "inStock": "En Stock",
        "lowStock": "Stock Faible",
        "outOfStock": "Rupture de Stock",
        "financialAccounting": "Comptabilité en partie double",
        "generalLedger": "Grand Livre",
        "accountBalances": "Soldes des Comptes",
        "trialBalance": "Balance Générale",
        "manualEntry": "Écriture Manuelle",
        "newJournalEntry": "Nouvelle Écriture",
        "postEntry": "Passer l'Écriture",
        "account": "Compte",
        "debit": "Débit",
        "credit": "Crédit",
        "description": "Libellé",
        "date": "Date",
        "id": "ID",
        "type": "Type",
        "party": "Tiers",
        "status": "Statut",
        "total": "Total",
        "totalAmount": "Montant Total",
        "aiGreeting": "Bonjour ! Je suis votre analyste financier IA. Posez-moi vos questions sur votre entreprise.",
        "askAI": "Demandez à l'analyste IA...",
        "typeMessage": "Tapez votre message...",
        "analyzing": "Analyse de vos comptes...",
        "enterApiKey": "Clé API Gemini",
        "systemSettings": "Paramètres du Système",
        "preferences": "Préférences",
        "language": "Langue",
        "currency": "Devise",
        "exportData": "Exporter les Données",
        "importData": "Importer les Données",
        "save": "Enregistrer",
        "profileSetup": "Configurez le profil de votre entreprise",
        "setupDescription": "Parlez-nous un peu de votre entreprise pour commencer.",
        "yourName": "Votre Nom",
        "businessName": "Nom de l'Entreprise",
        "location": "Localisation",
        "getStarted": "Commencer",
        "welcome": "Bienvenue",
        "adminUser": "Administrateur",
    },
}


def get_label(language: str, key: str) -> str:
    """
    Look up a display label.

    Falls back to English for an unknown language or a key missing in
    that language, and to the key itself when English lacks it too.
    """
    table = TRANSLATIONS.get(language, TRANSLATIONS[DEFAULT_LANGUAGE])
    if key in table:
        return table[key]
    return TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)
